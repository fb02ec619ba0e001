"""Save/load and export/import of game snapshots.

Auto-save: JSON file written atomically (tmp + rename).
Export: base64 of AES-256-CBC encrypted JSON, for copy/paste save codes.
Import: accepts raw JSON, base64-JSON and the encrypted export.

Loading never raises: a missing or corrupt snapshot means "no save".
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import asdict, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from Crypto.Cipher import AES
from Crypto.Protocol.KDF import PBKDF2
from Crypto.Random import get_random_bytes
from Crypto.Util.Padding import pad, unpad

from digital_matrix.catalog import (
    HOME_SERVER_ID,
    initial_achievements,
    initial_servers,
    initial_upgrades,
)
from digital_matrix.state import GameState, find_server
from digital_matrix.types import DynamicEvent, Mission, NetworkAttack

log = logging.getLogger(__name__)

SAVE_VERSION = 1

_PASS_PHRASE = b"d1g1t4l-m4tr1x::s4ve"
_SALT = b"wake-up-neo-2199"
_KDF_ITERATIONS = 1000
_KEY_SIZE = 32  # AES-256

_COLLECTIONS = ("upgrades", "achievements", "servers", "active_attacks", "missions", "dynamic_events")


def build_save_dict(state: GameState) -> Dict[str, Any]:
    data = asdict(state)
    data["version"] = SAVE_VERSION
    return data


def _restore_upgrades(saved: list) -> list:
    by_id = {entry["id"]: entry for entry in saved}
    result = []
    for upgrade in initial_upgrades():
        entry = by_id.pop(upgrade.id, None)
        if entry is not None:
            level = int(entry.get("level", 0))
            if upgrade.max_level > 0:
                level = min(level, upgrade.max_level)
            upgrade = replace(upgrade, level=level,
                              is_unlocked=bool(entry.get("is_unlocked", upgrade.is_unlocked)))
        result.append(upgrade)
    for unknown in by_id:
        log.warning("[save] unknown upgrade '%s', skipping", unknown)
    return result


def _restore_achievements(saved: list) -> list:
    by_id = {entry["id"]: entry for entry in saved}
    result = []
    for achievement in initial_achievements():
        entry = by_id.pop(achievement.id, None)
        if entry is not None:
            achievement = replace(achievement,
                                  unlocked=bool(entry.get("unlocked", False)),
                                  claimed=bool(entry.get("claimed", False)))
        result.append(achievement)
    for unknown in by_id:
        log.warning("[save] unknown achievement '%s', skipping", unknown)
    return result


def _restore_servers(saved: list) -> list:
    by_id = {entry["id"]: entry for entry in saved}
    result = []
    for server in initial_servers():
        entry = by_id.pop(server.id, None)
        if entry is not None:
            security = float(entry.get("security_level", 0.0))
            if server.id == HOME_SERVER_ID:
                security = 0.0
            server = replace(server,
                             security_level=min(server.max_security_level, max(0.0, security)),
                             is_unlocked=server.is_unlocked or bool(entry.get("is_unlocked", False)))
        result.append(server)
    for unknown in by_id:
        log.warning("[save] unknown server '%s', skipping", unknown)
    return result


def restore_from_dict(data: Dict[str, Any]) -> Optional[GameState]:
    """Rebuild a GameState from a snapshot dict. Returns None on bad data."""
    try:
        version = int(data["version"])
        if version > SAVE_VERSION:
            log.warning("[save] snapshot version %d is newer than supported %d", version, SAVE_VERSION)
            return None

        defaults = GameState()
        scalars = {}
        for f in fields(GameState):
            if f.name in _COLLECTIONS or f.name not in data:
                continue
            scalars[f.name] = type(getattr(defaults, f.name))(data[f.name])

        state = replace(
            defaults,
            upgrades=_restore_upgrades(data.get("upgrades", [])),
            achievements=_restore_achievements(data.get("achievements", [])),
            servers=_restore_servers(data.get("servers", [])),
            active_attacks=[NetworkAttack.from_dict(a) for a in data.get("active_attacks", [])],
            missions=([Mission.from_dict(m) for m in data["missions"]]
                      if "missions" in data else defaults.missions),
            dynamic_events=[DynamicEvent.from_dict(e) for e in data.get("dynamic_events", [])],
            **scalars,
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        log.warning("[save] error restoring save data: %s", e)
        return None

    server = find_server(state, state.current_server_id)
    if server is None or not server.is_unlocked:
        state = replace(state, current_server_id=HOME_SERVER_ID)
    return state


def save_game(state: GameState, path: Path) -> None:
    """Auto-save: write JSON atomically (tmp + rename)."""
    data = build_save_dict(state)
    tmp_path = path.with_suffix(".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp_path.replace(path)
    except OSError as e:
        log.warning("[save] error saving game: %s", e)


def load_game(path: Path) -> Optional[GameState]:
    """Auto-load. Returns None on a missing or corrupt file."""
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        log.warning("[save] error loading save file: %s", e)
        return None
    if not isinstance(data, dict):
        log.warning("[save] save file does not hold a snapshot")
        return None
    return restore_from_dict(data)


def _derive_key() -> bytes:
    return PBKDF2(_PASS_PHRASE, _SALT, dkLen=_KEY_SIZE, count=_KDF_ITERATIONS)


def export_save(state: GameState) -> str:
    """Encrypted save code: base64(iv + AES-256-CBC(PKCS7(json)))."""
    plaintext = json.dumps(build_save_dict(state), separators=(",", ":")).encode("utf-8")
    iv = get_random_bytes(AES.block_size)
    cipher = AES.new(_derive_key(), AES.MODE_CBC, iv)
    encrypted = cipher.encrypt(pad(plaintext, AES.block_size))
    return base64.b64encode(iv + encrypted).decode("ascii")


def _decrypt_export(raw: bytes) -> Optional[str]:
    if len(raw) < 2 * AES.block_size or len(raw) % AES.block_size != 0:
        return None
    iv, body = raw[:AES.block_size], raw[AES.block_size:]
    cipher = AES.new(_derive_key(), AES.MODE_CBC, iv)
    try:
        return unpad(cipher.decrypt(body), AES.block_size).decode("utf-8")
    except (ValueError, UnicodeDecodeError) as e:
        log.warning("[save] AES decryption failed: %s", e)
        return None


def _try_import_data(encoded: str) -> Optional[Dict[str, Any]]:
    """Try to parse import data in multiple formats.

    1. Raw JSON dict (auto-save file contents)
    2. base64 -> JSON dict
    3. base64 -> AES-256-CBC ciphertext -> JSON dict (export code)
    """
    encoded = encoded.strip()
    try:
        data = json.loads(encoded)
        if isinstance(data, dict) and "version" in data:
            return data
    except ValueError:
        pass

    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        return None

    try:
        data = json.loads(raw.decode("utf-8"))
        if isinstance(data, dict) and "version" in data:
            return data
    except (ValueError, UnicodeDecodeError):
        pass

    plaintext = _decrypt_export(raw)
    if plaintext is None:
        return None
    try:
        data = json.loads(plaintext)
    except ValueError:
        return None
    if isinstance(data, dict) and "version" in data:
        return data
    return None


def import_save(encoded: str) -> Optional[GameState]:
    data = _try_import_data(encoded)
    if data is None:
        log.warning("[save] could not parse import data (not a valid save)")
        return None
    return restore_from_dict(data)
