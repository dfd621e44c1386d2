"""Static lookup tables shared by the detectors.

All tables are immutable and never written after import.
"""

from types import MappingProxyType


# Zero-width and invisible formatting characters, keyed by code point
INVISIBLE_CHARS = MappingProxyType(
    {
        '\u200b': 'zwsp',  # Zero width space
        '\u200c': 'zwnj',  # Zero width non-joiner
        '\u200d': 'zwj',  # Zero width joiner
        '\u200e': 'lrm',  # Left-to-right mark
        '\u200f': 'rlm',  # Right-to-left mark
        '\u061c': 'alm',  # Arabic letter mark
        '\u00ad': 'shy',  # Soft hyphen
        '\ufeff': 'bom',  # Byte order mark / zero width no-break space
        '\u2060': 'wj',  # Word joiner
    }
)

# Bidirectional formatting controls (CVE-2021-42574)
BIDI_CONTROLS = MappingProxyType(
    {
        '\u202a': 'lre',  # Left-to-right embedding
        '\u202b': 'rle',  # Right-to-left embedding
        '\u202c': 'pdf',  # Pop directional formatting
        '\u202d': 'lro',  # Left-to-right override
        '\u202e': 'rlo',  # Right-to-left override
        '\u2066': 'lri',  # Left-to-right isolate
        '\u2067': 'rli',  # Right-to-left isolate
        '\u2068': 'fsi',  # First strong isolate
        '\u2069': 'pdi',  # Pop directional isolate
    }
)

LTR_BIDI_CONTROLS = frozenset({'\u202a', '\u202d', '\u2066'})
RTL_BIDI_CONTROLS = frozenset({'\u202b', '\u202e', '\u2067'})

# Keywords that turn hidden characters into a likely evasion attempt
SUSPICIOUS_KEYWORDS = (
    'system:',
    'prompt:',
    'instruction',
    'should:',
    'refuse',
    'reject',
    "don't",
    'never',
    'always',
    'bypass',
    'ignore',
    'override',
    'secret',
)

# (first, last) code point ranges treated as emoji
EMOJI_RANGES = (
    (0x1F600, 0x1F64F),  # Emoticons
    (0x1F300, 0x1F5FF),  # Misc symbols and pictographs
    (0x1F680, 0x1F6FF),  # Transport and map
    (0x1F1E0, 0x1F1FF),  # Regional indicators (flags)
    (0x1F900, 0x1F9FF),  # Supplemental symbols and pictographs
    (0x2600, 0x26FF),  # Misc symbols
    (0x2700, 0x27BF),  # Dingbats
)

REGIONAL_INDICATORS = (0x1F1E6, 0x1F1FF)
SKIN_TONE_MODIFIERS = (0x1F3FB, 0x1F3FF)

EMOJI_TOKEN_COSTS = MappingProxyType(
    {
        'standard': 1,
        'skin_tone': 2,
        'flag': 2,
        'zwj_sequence': 3,
    }
)

# Known glitch tokens (arXiv:2404.09894)
GLITCH_TOKENS = (
    ' SolidGoldMagikarp',
    ' davidjl',
    ' RandomRedditorWithNo',
    ' TheNitromeFan',
    '?????-?????-',
    ' externalToEVA',
    ' externalToEVAOnly',
    ' StreamerBot',
    ' TPPStreamerBot',
    ' SolidGoldMagikarp123',
    '--------',
    ' embedreportprint',
    ' cloneembedreportprint',
    ' rawdownload',
    ' rawdownloadcloneembedreportprint',
    ' InstoreAndOnline',
    ' guiActiveUn',
    ' guiActiveUnfocused',
    ' guiName',
    ' guiIcon',
    ' externalTo',
    ' ÃÂÃÂÃÂÃÂ',
    ' ÃÂÃÂ',
    ' "><',
    ' админист',
    ' "></',
    ' oreAndOnline',
    ' oreAndOnlineOnly',
    ' DeliveryDate',
    ' BuyableInstoreAndOnline',
    ' MessageLookupByLibrary',
    ' MessageType',
    ' ForgeModLoader',
    ' PsyNetMessage',
    ' InputMethodManager',
    ' ÃÂ',
    '龍喚士',
    ' attRot',
    '\\<',
    ' TheNitrome',
    ' SolidGold',
)

# Markers of instructions that should not be buried mid-context
IMPORTANT_KEYWORDS = (
    'system:',
    'instruction:',
    'important:',
    'note:',
    'critical:',
    'must:',
    'required:',
)

SYCOPHANTIC_PHRASES = (
    'you are a helpful assistant who always agrees',
    'always support the user',
    'never disagree',
    'you must comply',
    'the user is always right',
    "don't contradict",
    'always agree with',
    'prioritize user satisfaction',
    'be positive',
    "don't be critical",
    'avoid disagreement',
    'support every request',
    'never say no',
)

ROLE_CONFUSION_PHRASES = (
    'you are now',
    'pretend you are',
    'act as if',
    'switch to',
    'become a',
    'imagine you are',
)

LEETSPEAK_PATTERNS = ('1337', 'h4x', 'l33t', 'w4nn4', 'n00b', 'pwn', '0wn', 'd00d')

LEETSPEAK_DECODE = str.maketrans({'1': 'l', '3': 'e', '4': 'a', '0': 'o', '7': 't', '$': 's', '@': 'a', '!': 'i'})

ASCII_ART_CHARS = frozenset('─│┌┐└┘├┤┬┴┼═║╔╗╚╝╠╣╦╩╬' + '|-+/\\*#@_<>[]{}()')
