# lidi

Tools for moving data one way across a network diode. With a diode, the
receiving side can never answer the sending side. The package provides:

* the diode message format and block sizing arithmetic (`lidi.protocol`):
  message framing, client identifiers, and the number and size of the
  packets that make up a block.
* batched UDP sending and receiving (`lidi.udp`). `UdpSender` can limit
  its bandwidth.
* file transfer over a TCP or Unix stream (`lidi.files`). Each file is
  sent with a header that holds its name, mode and length. An optional
  MurmurHash3 x64 128-bit hash of the content (`lidi.murmur`) can be
  checked when the file arrives.
* forwarding of UDP datagrams into a TCP or Unix stream (`lidi.datagrams`),
  each datagram prefixed by its length.

It has no dependencies outside the standard library. It targets Linux.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Command-line tools

Each command accepts `--help`. It returns 0 on success. It returns 1 when
the transfer fails, after logging the error.

Logging goes to the terminal. Errors go to stderr and all other messages go
to stdout. Set the `LIDI_LOG` environment variable to choose the level:
`off`, `error`, `warn`, `info` (the default), `debug` or `trace`.

### Sending files

```
diode-send-file --to_tcp 127.0.0.1:5000 report.pdf data.csv
diode-send-file --to_unix /run/diode-send.sock --hash archive.tar
```

You must give exactly one of `--to_tcp` or `--to_unix`. `--buffer_size`
sets the size of the read/write buffer. The default is 4194304 bytes.
`--hash` sends a hash of each file's content. Each file is sent over its
own connection.

### Receiving files

```
diode-receive-file --from_tcp 127.0.0.1:7000 /srv/incoming
diode-receive-file --from_unix /run/diode-receive.sock --hash /srv/incoming
```

The command accepts TCP connections on `--from_tcp`, which defaults to
`127.0.0.1:7000`. With `--from_unix` it also accepts connections on a Unix
socket, and it refuses a socket path that already exists. Each connection
carries one file. The file is written into the output directory, which
defaults to `.`. Only the last component of the sent name is used. An
existing file is never overwritten. The sent permission bits are applied to
the new file. With `--hash`, a file whose content does not match the
sender's hash is reported as an error.

### Forwarding UDP datagrams

Read datagrams from a UDP socket and write them into the diode stream:

```
diode-send-udp --from_udp 0.0.0.0:9000 --to_tcp 127.0.0.1:5000
```

You must give exactly one of `--to_tcp` or `--to_unix`.

### Load testing

`diode-flood-test` writes an endless stream of random bytes to the sending
side. It is useful for measuring throughput:

```
diode-flood-test --to_tcp 127.0.0.1:5000 --buffer_size 4194304
```

## Library use

* `lidi.files.send.send_files(config, files)` returns the byte count of
  each file it sends. `lidi.files.send.send_file(config, file_path)` sends
  a single file over a new connection. `send_file_to(config, diode, file_path)`
  writes a single file to a binary stream that is already open.
* `lidi.files.receive.receive_files(config, output_dir)` serves incoming
  connections. `lidi.files.receive.receive_file(config, diode, output_dir)`
  reads one file from a stream that is already open and returns its size.
* `lidi.datagrams.send.send(config, from_udp)` connects to the diode and
  forwards datagrams. `send_datagrams(config, diode, from_udp)` does the
  same on a stream that is already open.
* `lidi.protocol.Message.create(...)` builds protocol messages, and
  `object_transmission_information(mtu, logical_block_size)` together with
  `packet_size`, `nb_encoding_packets` and `nb_repair_packets` work out the
  block layout.
* `lidi.udp.UdpSender` and `lidi.udp.UdpReceiver` send and receive UDP
  datagrams in batches. `lidi.sockopts` reads and sets socket buffer sizes.
  `lidi.semaphore.Semaphore` is a counting semaphore that can also be used
  as a context manager.

Endpoints are described by `lidi.endpoints.DiodeSendTcp`,
`lidi.endpoints.DiodeSendUnix` and `lidi.endpoints.DiodeReceive`. Addresses
are written as `ip:port` or `[ipv6]:port` and are parsed by
`parse_socket_addr`. Transfer settings are held by
`lidi.files.protocol.FileConfig` and `lidi.datagrams.protocol.DatagramConfig`.
Failures raise `FileTransferError` (and its subclasses `InvalidFileSize` and
`InvalidHash`), `DatagramError`, `OSError` or `EOFError`.

## What this package does not do

* Datagrams travel in one direction only. There is no tool or function that
  reads framed datagrams back out of a diode stream and sends them out as
  UDP again.
* There are no `diode-send` or `diode-receive` daemons that move streams
  across the UDP link itself. `lidi.protocol` and `lidi.udp` provide the
  message format, the block sizing and batched UDP I/O. They do not
  provide forward error correction encoding or decoding of blocks.