"""stowr — entity and aggregate code generation for event-sourced domains.

Declaration markers and the runtime types generated code builds on are
re-exported here::

    from stowr import command, domain, domain_impl
"""

from stowr.domain.aggregate import Aggregate, AggregateError, Command, Entity, Event, SumType
from stowr.domain.ids import RepositoryId, Tag
from stowr.domain.markers import command, domain, domain_impl
from stowr.domain.repository import Repository

__version__ = "0.1.0"

__all__ = [
    "Aggregate",
    "AggregateError",
    "Command",
    "Entity",
    "Event",
    "Repository",
    "RepositoryId",
    "SumType",
    "Tag",
    "__version__",
    "command",
    "domain",
    "domain_impl",
]
