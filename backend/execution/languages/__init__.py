"""
Language profiles, looked up by language identifier
"""

from types import MappingProxyType
from typing import Mapping

from ..models import LanguageProfile
from .cpp import PROFILE as CPP
from .java import PROFILE as JAVA
from .javascript import PROFILE as JAVASCRIPT
from .python import PROFILE as PYTHON


class UnsupportedLanguageError(ValueError):
    """Raised when a language identifier has no profile"""

    def __init__(self, language: str):
        super().__init__(f"Language not supported: {language}")
        self.language = language


LANGUAGE_PROFILES: Mapping[str, LanguageProfile] = MappingProxyType({
    profile.id: profile for profile in (CPP, PYTHON, JAVA, JAVASCRIPT)
})


def get_profile(language: str) -> LanguageProfile:
    """
    Resolve a language identifier to its profile

    Raises:
        UnsupportedLanguageError: If the identifier is unknown
    """
    try:
        return LANGUAGE_PROFILES[language]
    except KeyError:
        raise UnsupportedLanguageError(language) from None


__all__ = ['LANGUAGE_PROFILES', 'UnsupportedLanguageError', 'get_profile']
