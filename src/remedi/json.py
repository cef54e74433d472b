''' JSON encoding for REMEDI wire messages and configuration files. Every
    message is one compact JSON object: :func:`dumps` always returns UTF-8
    bytes, ready to hand to a transport, and :func:`loads` accepts the str
    or bytes a transport delivers. A failed decode raises one of the
    exceptions in :data:`DecodeError`, which the dispatcher reports as a
    malformed message.
'''

# msgspec is a declared dependency; orjson and the standard library are only
# imported when it is missing.

msgspec = None
orjson = None
json = None

try:
    import msgspec
except ImportError:
    pass

if msgspec is None:
    try:
        import orjson
    except ImportError:
        pass

if msgspec is None and orjson is None:
    import json


# Transports and configuration files expect bytes from every backend.

def json_dumps(*args, **kwargs):
    kwargs.setdefault('separators', (',', ':'))
    kwargs.setdefault('ensure_ascii', False)
    return json.dumps(*args, **kwargs).encode()

if msgspec is not None:
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    loads = decoder.decode
    DecodeError = (msgspec.DecodeError, ValueError)
elif orjson is not None:
    dumps = orjson.dumps
    loads = orjson.loads
    DecodeError = (orjson.JSONDecodeError, ValueError)
else:
    dumps = json_dumps
    loads = json.loads
    DecodeError = (ValueError,)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
