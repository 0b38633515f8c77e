"""Description lookup for commands, arguments and options.

:class:`DocumentationResolver` consults a ranked list of
:class:`DescriptionProvider` implementations:

* :class:`DocstringProvider` -- docstrings, ``Field(description=...)`` and
  dataclass field metadata.
* :class:`ArtifactProvider` -- structured XML or JSON documentation files
  keyed by member identity (``M:module.func``, ``P:module.Type.field``).
* :class:`SourceCommentProvider` -- ``#`` comment blocks above definitions,
  read with :mod:`ast`.
"""

from funcli.docs.artifact import ArtifactProvider
from funcli.docs.base import DescriptionProvider
from funcli.docs.docstrings import DocstringProvider
from funcli.docs.resolver import DocumentationResolver
from funcli.docs.scanner import SourceCommentProvider

__all__ = [
    "ArtifactProvider",
    "DescriptionProvider",
    "DocstringProvider",
    "DocumentationResolver",
    "SourceCommentProvider",
]
