__version__ = "0.3.0"

__all__ = [
    # Byte/hex codec
    "MalformedHexError",
    "ZERO_ADDRESS",
    "from_hex",
    "hex_to_int",
    "to_hex",
    "to_quantity",
    # Keys
    "InvalidKeyError",
    "get_address",
    "load_private_key",
    # Signing
    "Signature",
    "SignedTransaction",
    "UnsignedTransaction",
    "compute_v",
    "recover_sender",
    "sign_transaction",
    # RPC
    "JsonRpcClient",
    "RPCError",
    "ReceiptView",
    "TransactionView",
    "call",
    "get_gas_price",
    "get_transaction",
    "get_transaction_count",
    "get_transaction_receipt",
    "send_raw_transaction",
    "send_transaction",
    "wait_for_receipt",
    # Revert reasons
    "MalformedRevertPayloadError",
    "TransactionNotFoundError",
    "TX_DID_NOT_FAIL",
    "TX_OUT_OF_GAS",
    "get_revert_reason",
    "parse_revert_reason",
]

from .utils import (
    ZERO_ADDRESS,
    MalformedHexError,
    from_hex,
    hex_to_int,
    to_hex,
    to_quantity,
)
from .signing.keys import InvalidKeyError, get_address, load_private_key
from .signing.tx import (
    Signature,
    SignedTransaction,
    UnsignedTransaction,
    compute_v,
    recover_sender,
    sign_transaction,
)
from .rpc.client import JsonRpcClient, RPCError
from .rpc.views import ReceiptView, TransactionView
from .rpc.gateway import (
    call,
    get_gas_price,
    get_transaction,
    get_transaction_count,
    get_transaction_receipt,
    send_raw_transaction,
    send_transaction,
    wait_for_receipt,
)
from .rpc.revert import (
    TX_DID_NOT_FAIL,
    TX_OUT_OF_GAS,
    MalformedRevertPayloadError,
    TransactionNotFoundError,
    get_revert_reason,
    parse_revert_reason,
)
