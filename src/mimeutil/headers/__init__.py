# Header codec: folding, RFC 2047 encoded words, RFC 2045 parameters

from .codec import (
    decode,
    encode,
    fold_and_encode,
    fold_and_encode2,
    unfold_and_decode,
)
from .encoded_word import (
    EncodedWord,
    Encoding,
    choose_encoding,
    decode_token,
    encode_token,
)
from .folding import fold, unfold
from .parameters import get_header_parameter

__all__ = [
    "unfold",
    "fold",
    "decode",
    "unfold_and_decode",
    "encode",
    "fold_and_encode",
    "fold_and_encode2",
    "EncodedWord",
    "Encoding",
    "choose_encoding",
    "decode_token",
    "encode_token",
    "get_header_parameter",
]
