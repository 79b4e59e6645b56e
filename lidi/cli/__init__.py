"""Command-line entry points for file transfer, datagram forwarding and load testing."""