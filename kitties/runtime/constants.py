"""Centralized constants for the kitties runtime.

Storage prefixes and genome sizing live here to avoid string literals
scattered across modules.
"""

# Length of a kitty genome (and of a breeding selector) in bytes
DNA_SIZE = 16

# Largest index representable by an unsigned 32-bit KittyIndex
U32_MAX = 2**32 - 1

# Storage prefixes, one per logical map/value
PREFIX_KITTIES = "Kitties"
PREFIX_KITTY_OWNER = "KittyOwner"
PREFIX_KITTIES_COUNT = "KittiesCount"
PREFIX_OWNED_KITTIES = "OwnedKitties"
PREFIX_OWNED_KITTIES_SLOT = "OwnedKittiesSlot"
PREFIX_OWNED_KITTIES_COUNT = "OwnedKittiesCount"
PREFIX_OWNED_KITTIES_INDEX = "OwnedKittiesIndex"
PREFIX_BALANCES = "Balances"

# Ownership index implementations selectable from config
INDEX_LINKED_LIST = "linked_list"
INDEX_SLOT_ARRAY = "slot_array"
