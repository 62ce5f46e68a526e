"""Config package initialization."""

from .settings import Config, ConfigurationError, config
from .lexicon_loader import LexiconError, LexiconLoader
from .logging_setup import setup_logging

__all__ = ['Config', 'ConfigurationError', 'config', 'LexiconError', 'LexiconLoader', 'setup_logging']
