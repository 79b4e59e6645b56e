"""Sending and receiving whole files through a diode stream."""