"""Pattern detectors.

This package contains every detector run by the analysis engine: eleven
LLM safety checks followed by four stylistic pattern checks.
"""

from .base import PatternDetector
from .bidi import BiDiControlDetector
from .confusables import ConfusablesDetector
from .consecutive_empty import ConsecutiveEmptyDetector
from .context_placement import ContextPlacementDetector
from .emoji import EmojiDetector
from .encoding import EncodingDetector
from .glitch_token import GlitchTokenDetector
from .invisible import InvisibleCharDetector
from .long_line import LongLineDetector
from .normalization import NormalizationDetector
from .number_formatting import NumberFormattingDetector
from .oov_strings import OOVStringsDetector
from .prompt_ambiguity import PromptAmbiguityDetector
from .repeated_phrase import RepeatedPhraseDetector
from .url import URLDetector


__all__ = [
    # Base class
    'PatternDetector',
    # LLM safety detectors
    'EmojiDetector',
    'InvisibleCharDetector',
    'NumberFormattingDetector',
    'OOVStringsDetector',
    'BiDiControlDetector',
    'ConfusablesDetector',
    'EncodingDetector',
    'NormalizationDetector',
    'GlitchTokenDetector',
    'ContextPlacementDetector',
    'PromptAmbiguityDetector',
    # Pattern detectors
    'URLDetector',
    'ConsecutiveEmptyDetector',
    'LongLineDetector',
    'RepeatedPhraseDetector',
    # Factory
    'default_detectors',
]


def default_detectors() -> list[PatternDetector]:
    """Get list of default detectors in priority order.

    Returns:
        List of instantiated detector objects.
    """
    return [
        # LLM safety (priorities 1-11)
        EmojiDetector(),
        InvisibleCharDetector(),
        NumberFormattingDetector(),
        OOVStringsDetector(),
        BiDiControlDetector(),
        ConfusablesDetector(),
        EncodingDetector(),
        NormalizationDetector(),
        GlitchTokenDetector(),
        ContextPlacementDetector(),
        PromptAmbiguityDetector(),
        # Stylistic patterns (priorities 12-15)
        URLDetector(),
        ConsecutiveEmptyDetector(),
        LongLineDetector(),
        RepeatedPhraseDetector(),
    ]
