# filetransfer

Building blocks for a file transfer server, usable on their own from Python:

- `filetransfer.logger`: a process-wide `Logger` with levels (`LogLevel`),
  coloured console output, an optional size-limited log file that is rotated
  when it grows too large, and listeners that receive every formatted record.
  The module-level helpers `debug`, `info`, `warning`, `error` and `fatal`
  log through the shared instance.
- `filetransfer.thread_pool`: a fixed-size `ThreadPool` that runs submitted
  callables on worker threads, returns a future for each, and can be used as
  a context manager.
- `filetransfer.config_manager`: a `ConfigManager` for simple `key = value`
  files, with typed lookups (`get_string`, `get_int`, `get_float`,
  `get_bool`) that fall back to a default.
- `filetransfer.encryption`: hex and Base64 helpers, MD5/SHA-1/SHA-256
  digests, AES-256-CBC encryption, random bytes and strings, and a
  Diffie-Hellman key exchange over the RFC 7919 `ffdhe2048` group with HKDF
  derivation of an AES key and IV.
- `filetransfer.server_config`: a `ServerConfig` holding the server's
  settings, loadable from a configuration file or from command-line style
  arguments; bad input raises `ConfigError`.

## Logging

```python
from filetransfer.logger import Logger, LogLevel, info

logger = Logger.instance()
logger.init(LogLevel.DEBUG, True, "logs/server.log", 10 * 1024 * 1024)
logger.add_listener(lambda level, record: print(level, record))

info("listening on %s:%d", "0.0.0.0", 8080)
```

Records below the current level are dropped. When the log file grows past
its size limit it is renamed with a timestamp suffix and a new file started.

## Thread pool

```python
from filetransfer.thread_pool import ThreadPool

with ThreadPool(4) as pool:
    future = pool.submit(sum, [1, 2, 3])
    print(future.result())
```

Stopping the pool lets queued tasks finish first. Submitting to a pool that
has been stopped raises `RuntimeError`. `pending_tasks` and `thread_count`
report the queue length and the number of workers.

## Key/value configuration

```python
from filetransfer.config_manager import ConfigManager

config = ConfigManager.instance()
config.load("app.conf")
port = config.get_int("port", 8080)
config.set("debug", True)
if "debug" in config:
    config.save("app.conf")
```

Lines that are empty or start with `#` are ignored; keys and values are
trimmed of surrounding spaces and tabs. `load` raises `OSError` when the file
cannot be read, and `save` with no path and no loaded file raises
`ValueError`. Settings are written sorted by key.

## Encryption

```python
from filetransfer import encryption

params, local = encryption.generate_dh_params()
# send params to the peer, receive the peer's DHParams as peer_params
shared = encryption.compute_dh_shared_key(peer_params, local)
derived = encryption.derive_key_and_iv(shared)

ciphertext = encryption.aes_encrypt(b"payload", *derived)
assert encryption.aes_decrypt(ciphertext, *derived) == b"payload"

print(encryption.sha256(b"payload"))
print(encryption.hex_encode(b"\x00\xff"))
```

Malformed input (a wrong AES key or IV length, bad padding, invalid hex or
Base64, out-of-range Diffie-Hellman values) raises `ValueError`.

## Server configuration

```python
from filetransfer.server_config import ServerConfig, ConfigError

config = ServerConfig.instance()
try:
    config.load_from_args(["--port", "9000", "--storage", "./storage"])
except ConfigError as exc:
    print(exc)
```

`load_from_args` returns `False` after printing usage for `-h`/`--help`.
A configuration file uses the same `key = value` form, for example:

```
listen_address = 127.0.0.1
listen_port = 9000
enable_zero_copy = false
```

`ServerConfig.reset()` restores every setting to its default.

## What this package does not do

It holds no server: there is no listening socket, no client session
handling, no wire protocol and no file storage, and it installs no command.
`ServerConfig` only holds settings such as the listen address and storage
path; nothing in the package acts on them.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.