from __future__ import annotations

import hashlib
from random import Random


def derive_seed(base_seed: int, *, day: int, sortie_seq: int, stream: str, purpose: str) -> int:
    payload = f"{base_seed}|{day}|{sortie_seq}|{stream}|{purpose}".encode("utf-8")
    digest = hashlib.blake2b(payload, digest_size=8).digest()
    return int.from_bytes(digest, "big")


def sortie_rng(base_seed: int, *, day: int = 0, sortie_seq: int = 0) -> Random:
    return Random(derive_seed(base_seed, day=day, sortie_seq=sortie_seq, stream="sortie", purpose="resolve"))
