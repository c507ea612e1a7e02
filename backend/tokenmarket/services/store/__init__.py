from tokenmarket.services.store.batch import (
    BatchWriteResult,
    BatchWriter,
    batch_writer,
    parse_batch,
    write_batch,
)
from tokenmarket.services.store.common import (
    MAX_BIND_PARAMS,
    clean_data_for_db,
    get_chunks,
)
from tokenmarket.services.store.errors import (
    BatchCommitError,
    InvalidRecordError,
    StoreError,
)
from tokenmarket.services.store.listings import ListingStore, listing_store
from tokenmarket.services.store.volumes import (
    VolumeStore,
    VolumeWriteResult,
    volume_store,
)

__all__ = [
    "BatchCommitError",
    "BatchWriteResult",
    "BatchWriter",
    "InvalidRecordError",
    "ListingStore",
    "MAX_BIND_PARAMS",
    "StoreError",
    "VolumeStore",
    "VolumeWriteResult",
    "batch_writer",
    "clean_data_for_db",
    "get_chunks",
    "listing_store",
    "parse_batch",
    "volume_store",
    "write_batch",
]
