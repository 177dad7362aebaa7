"""Index definitions for the funnel collections, applied at app startup.

An existing index whose name or keys drifted from the definition is dropped
and rebuilt.
"""

from dataclasses import dataclass, field
from logging import getLogger

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from adapter.mongodb import MEMBERS_COLLECTION_NAME

logger = getLogger(__name__)


@dataclass(frozen=True)
class IndexDefinition:
    name: str
    keys: list[tuple[str, int]]
    options: dict = field(default_factory=dict)


MEMBER_INDEXES = [
    # Not unique: several provider accounts may share one address
    IndexDefinition('idx_members_email', [('email', 1)]),
    IndexDefinition('idx_members_email_status', [('email_status', 1)]),
]


def apply_indexes(collection: Collection, definitions: list[IndexDefinition]) -> bool:
    """Create every index in ``definitions``. False if any could not be created."""
    ok = True
    for definition in definitions:
        try:
            collection.create_index(definition.keys, name=definition.name, **definition.options)
        except PyMongoError as e:
            if "already exists" not in str(e) and "Conflict" not in str(e):
                logger.error(
                    "Index creation failed",
                    extra={"collection": collection.name, "index": definition.name, "error": str(e)},
                )
                ok = False
                continue
            ok = _rebuild(collection, definition) and ok
    return ok


def _rebuild(collection: Collection, definition: IndexDefinition) -> bool:
    stale = _conflicting_index(collection, definition)
    if stale is None:
        logger.error(
            "Index conflict not resolved",
            extra={"collection": collection.name, "index": definition.name},
        )
        return False

    logger.warning(
        "Rebuilding drifted index",
        extra={"collection": collection.name, "dropped": stale, "index": definition.name},
    )
    collection.drop_index(stale)
    collection.create_index(definition.keys, name=definition.name, **definition.options)
    return True


def _conflicting_index(collection: Collection, definition: IndexDefinition) -> str | None:
    """Name of the index sharing either the name or the keys, but not both."""
    wanted_keys = dict(definition.keys)
    for name, info in collection.index_information().items():
        if name == '_id_':
            continue
        same_name = name == definition.name
        same_keys = dict(info.get('key', [])) == wanted_keys
        if same_name != same_keys:
            return name
    return None


def ensure_all_indexes(db) -> bool:
    return apply_indexes(db[MEMBERS_COLLECTION_NAME], MEMBER_INDEXES)
