# Kitties runtime package
from .module import KittiesModule
from .origin import Origin, ensure_signed
from .storage import KeyValueStore, StorageMap, StorageValue
from .ledger import Ledger
from .randomness import BlockContext, Randomness, RandomnessSource
from .registry import KittyRegistry
from .owned_kitties import OwnedKitties, OwnershipIndex
from .slot_index import SlotIndex
from .breeding import BreedingEngine, combine_dna, combine_genomes
from .marketplace import Marketplace
from .logger import EventLogger
from .types import Kitty, KittyLinkedItem, KittyInfo
from .errors import (
    ErrorCategory, ErrorCode, KittyError,
    KittyIndexOverflow, KittyNotFound, NotOwner, Unauthenticated,
    SameParent, InvalidParent, NotForSale, PriceTooHigh, CannotBuyOwn,
    InvalidPrice, InvalidRecipient, InvalidArgument, InsufficientBalance,
    CountUnderflow, CountOverflow, UnknownCall,
)

__all__ = [
    "KittiesModule",
    "Origin", "ensure_signed",
    "KeyValueStore", "StorageMap", "StorageValue",
    "Ledger",
    "BlockContext", "Randomness", "RandomnessSource",
    "KittyRegistry",
    "OwnedKitties", "OwnershipIndex", "SlotIndex",
    "BreedingEngine", "combine_dna", "combine_genomes",
    "Marketplace",
    "EventLogger",
    "Kitty", "KittyLinkedItem", "KittyInfo",
    # Errors
    "ErrorCategory", "ErrorCode", "KittyError",
    "KittyIndexOverflow", "KittyNotFound", "NotOwner", "Unauthenticated",
    "SameParent", "InvalidParent", "NotForSale", "PriceTooHigh", "CannotBuyOwn",
    "InvalidPrice", "InvalidRecipient", "InvalidArgument", "InsufficientBalance",
    "CountUnderflow", "CountOverflow", "UnknownCall",
]
