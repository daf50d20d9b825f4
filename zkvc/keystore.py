"""
키 저장소 (TinyDB)
==================

SRS와 ASVC 키를 이름으로 저장/로드한다. 직렬화는 serializers 모듈의
dict 형태를 그대로 문서로 저장한다.

  KeyStore()                  # 메모리 저장소 (config.keystore_path가 비었을 때)
  KeyStore("keys.json")       # 파일 저장소

테이블:
  "kzg":  {"name": ..., "srs": {...}}
  "asvc": {"name": ..., "proving_key": {...}, "verification_key": {...}}

같은 이름으로 다시 저장하면 기존 문서를 교체한다.
"""

import logging

from tinydb import Query, TinyDB
from tinydb.storages import MemoryStorage

from zkvc.config import config
from zkvc.serializers import (
    deserialize_proving_key,
    deserialize_srs,
    deserialize_verification_key,
    serialize_proving_key,
    serialize_srs,
    serialize_verification_key,
)

logger = logging.getLogger(__name__)

Entry = Query()


class KeyStore:

    def __init__(self, path=None):
        if path is None:
            path = config.keystore_path
        if path:
            self.db = TinyDB(path)
        else:
            self.db = TinyDB(storage=MemoryStorage)
        self.path = path
        self.kzg_table = self.db.table("kzg")
        self.asvc_table = self.db.table("asvc")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self.db.close()

    def _replace(self, table, name, document):
        table.remove(Entry.name == name)
        table.insert(dict(document, name=name))

    # ── KZG ──

    def save_srs(self, name, srs):
        self._replace(self.kzg_table, name, {"srs": serialize_srs(srs)})
        logger.info("SRS 저장: %s (max_degree=%d)", name, srs.max_degree)

    def load_srs(self, name):
        """저장된 SRS. 없으면 None."""
        rows = self.kzg_table.search(Entry.name == name)
        if not rows:
            return None
        return deserialize_srs(rows[0]["srs"])

    # ── ASVC ──

    def save_asvc_keys(self, name, proving_key, verification_key):
        self._replace(self.asvc_table, name, {
            "proving_key": serialize_proving_key(proving_key),
            "verification_key": serialize_verification_key(verification_key),
        })
        logger.info("ASVC 키 저장: %s (degree=%d)", name, proving_key.degree)

    def load_asvc_keys(self, name):
        """저장된 (ProvingKey, VerificationKey). 없으면 None."""
        rows = self.asvc_table.search(Entry.name == name)
        if not rows:
            return None
        row = rows[0]
        return (
            deserialize_proving_key(row["proving_key"]),
            deserialize_verification_key(row["verification_key"]),
        )

    def remove(self, name):
        self.kzg_table.remove(Entry.name == name)
        self.asvc_table.remove(Entry.name == name)

    def names(self):
        """저장된 모든 이름 (정렬)."""
        rows = self.kzg_table.all() + self.asvc_table.all()
        return sorted({row["name"] for row in rows})
