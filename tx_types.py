from dataclasses import dataclass, field
from typing import TypedDict, Literal, Optional, Union, Any
from solana.rpc.commitment import Commitment
from solders.hash import Hash
from solders.signature import Signature

class RegularInstruction(TypedDict):
        accounts: list[str]
        data: str
        programId: str
        stackHeight: Optional[int]

class CompiledInstruction(TypedDict):
        accounts: list[int]
        data: str
        programIdIndex: int
        stackHeight: Optional[int]

class ParsedInstruction(TypedDict):
        parsed: dict
        program: str
        programId: str
        stackHeight: Optional[int]

Instruction = RegularInstruction | CompiledInstruction | ParsedInstruction

class TransactionMeta(TypedDict):
    class InnerInstruction(TypedDict):
        index: int
        instructions: list[Instruction]

    computeUnitsConsumed: int
    err: Optional[dict]
    fee: int
    innerInstructions: list[InnerInstruction]
    logMessages: list[str]
    postBalances: list[int]
    postTokenBalances: list[dict]
    preBalances: list[int]
    preTokenBalances: list[dict]
    rewards: Optional[list["BlockReward"]]

class TransactionMessage(TypedDict):
    class Header(TypedDict):
        numRequiredSignatures: int
        numReadonlySignedAccounts: int
        numReadonlyUnsignedAccounts: int

    accountKeys: list[Union[str, dict]]
    header: Header
    instructions: list[Instruction]
    recentBlockhash: str

class Transaction(TypedDict):
    message: TransactionMessage
    signatures: list[str]

# "base58" and "base64" encodings return the transaction as [data, encoding].
EncodedTransaction = Union[Transaction, list[str]]

class TransactionWithMeta(TypedDict):
    meta: Optional[TransactionMeta]
    transaction: EncodedTransaction
    version: Literal['legacy', 0]

class BlockReward(TypedDict):
    pubkey: str
    lamports: int
    postBalance: int
    rewardType: Optional[Literal['fee', 'rent', 'voting', 'staking']]
    commission: Optional[int]


class Encodings:
    JSON = "json"
    JSON_PARSED = "jsonParsed"
    BASE58 = "base58"  # slow
    BASE64 = "base64"

Encoding = Literal["json", "jsonParsed", "base58", "base64"]

VALID_BLOCK_ENCODINGS = frozenset({
    Encodings.JSON,
    Encodings.JSON_PARSED,
    Encodings.BASE58,
    Encodings.BASE64,
})

DEFAULT_BLOCK_ENCODING = Encodings.JSON


class TransactionDetails:
    FULL = "full"
    SIGNATURES = "signatures"
    NONE = "none"

TransactionDetailsType = Literal["full", "signatures", "none"]

DEFAULT_TRANSACTION_DETAILS = TransactionDetails.FULL

# previousBlockhash reported when the parent block was removed by ledger cleanup
PRUNED_PARENT_BLOCKHASH = Hash.from_string("11111111111111111111111111111111")


@dataclass
class GetBlockOpts:
    """
    Optional parameters of getBlock. A field left as None is not sent, so the node applies its own default.

    - encoding: encoding of each returned transaction, one of "json", "jsonParsed", "base58", "base64".
      "json" is sent when unset. "jsonParsed" falls back to regular JSON for instructions without a parser.
    - transaction_details: "full", "signatures" or "none". The node defaults to "full".
    - rewards: whether to populate the rewards array. The node includes rewards by default.
    - commitment: "finalized" or "confirmed"; "processed" is not supported. The node defaults to "finalized".
    - max_supported_transaction_version: highest transaction version to return. Required by current
      nodes for blocks that contain versioned transactions.
    """
    encoding: Optional[Encoding] = None
    transaction_details: Optional[TransactionDetailsType] = None
    rewards: Optional[bool] = None
    commitment: Optional[Commitment] = None
    max_supported_transaction_version: Optional[int] = None


@dataclass(frozen=True)
class FullTransactions:
    transactions: list[TransactionWithMeta]

@dataclass(frozen=True)
class SignaturesOnly:
    signatures: list[Signature]

@dataclass(frozen=True)
class NoTransactionDetails:
    pass

BlockTransactionDetails = FullTransactions | SignaturesOnly | NoTransactionDetails


@dataclass
class GetBlockResult:
    blockhash: Hash
    previous_blockhash: Hash
    parent_slot: int
    details: BlockTransactionDetails = field(default_factory=NoTransactionDetails)
    rewards: Optional[list[BlockReward]] = None
    block_time: Optional[int] = None
    block_height: Optional[int] = None

    @property
    def transactions(self) -> Optional[list[TransactionWithMeta]]:
        """Present if "full" transaction details were requested."""
        if isinstance(self.details, FullTransactions):
            return self.details.transactions
        return None

    @property
    def signatures(self) -> Optional[list[Signature]]:
        """Present if "signatures" were requested; ordered like the transactions in the block."""
        if isinstance(self.details, SignaturesOnly):
            return self.details.signatures
        return None

    @property
    def parent_pruned(self) -> bool:
        return self.previous_blockhash == PRUNED_PARENT_BLOCKHASH

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "blockhash": str(self.blockhash),
            "previousBlockhash": str(self.previous_blockhash),
            "parentSlot": self.parent_slot,
            "blockTime": self.block_time,
            "blockHeight": self.block_height,
        }
        if self.transactions is not None:
            out["transactions"] = self.transactions
        if self.signatures is not None:
            out["signatures"] = [str(signature) for signature in self.signatures]
        if self.rewards is not None:
            out["rewards"] = self.rewards
        return out
