"""MongoDB index management utilities.

Index creation with conflict resolution, used by MongoUserRepository.ensure_indexes().
"""

from logging import getLogger

from pymongo.errors import PyMongoError

logger = getLogger(__name__)

# Index options that change what an index enforces
_ENFORCING_OPTIONS = ('unique', 'partialFilterExpression')


def create_index_safe(collection, keys: list, name: str, **kwargs) -> bool:
    """Create an index, replacing a conflicting one if needed.

    A conflict is an existing index that shares the name or the key spec
    with the requested one but differs in keys, name, or enforcing options
    (``unique``, ``partialFilterExpression``). The conflicting index is
    dropped and the requested one created in its place.
    """
    try:
        collection.create_index(keys, name=name, **kwargs)
        return True
    except PyMongoError as e:
        if "already exists" not in str(e) and "Conflict" not in str(e):
            raise
        return _resolve_conflict(collection, keys, name, **kwargs)


def _options_of(spec: dict) -> dict:
    return {opt: spec.get(opt) for opt in _ENFORCING_OPTIONS if spec.get(opt)}


def _resolve_conflict(collection, keys: list, name: str, **kwargs) -> bool:
    keys_dict = dict(keys)
    wanted = _options_of(kwargs)

    for idx_name, idx_info in collection.index_information().items():
        if idx_name == '_id_':
            continue

        same_name = idx_name == name
        same_keys = dict(idx_info.get('key', [])) == keys_dict
        if not (same_name or same_keys):
            continue
        if same_name and same_keys and _options_of(idx_info) == wanted:
            continue

        logger.warning("Dropping conflicting index", extra={"index": idx_name, "wanted": name})
        collection.drop_index(idx_name)
        collection.create_index(keys, name=name, **kwargs)
        logger.info("Recreated index", extra={"index": name})
        return True

    logger.error("Failed to resolve index conflict", extra={"index": name})
    return False


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for all collections. Called at app startup."""
    from adapter.mongodb.user_repository import MongoUserRepository

    return MongoUserRepository(db).ensure_indexes()
