"""Forwarding UDP datagrams into a diode stream."""