"""Transformers: the base class and YAML-declared transformers."""

from wireshape.transformers.base import Transformer
from wireshape.transformers.declarative import DeclarativeTransformer, TransformerCatalog

__all__ = [
    "Transformer",
    "DeclarativeTransformer",
    "TransformerCatalog",
]
