"""SoundLibrary — JSON-backed store of saved sounds."""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass
from pathlib import Path

from ..errors import LibraryError, UISoundError
from ..synth.descriptor import SoundDescriptor
from ..synth.encoder import EncodedAudio, decode_header
from .naming import now_ms

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SavedSound:
    name: str
    audio: EncodedAudio
    descriptor: SoundDescriptor
    timestamp: int
    key: str | None = None

    def to_record(self) -> dict:
        return {
            "name": self.name,
            "blob_data": base64.b64encode(self.audio.data).decode("ascii"),
            "mime_type": self.audio.mime_type,
            "descriptor": self.descriptor.to_mapping(),
            "key": self.key,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_record(cls, record: dict) -> SavedSound:
        data = base64.b64decode(record["blob_data"], validate=True)
        header = decode_header(data)
        audio = EncodedAudio(
            data=data,
            sample_rate=header.sample_rate,
            sample_count=header.data_size // header.block_align,
            mime_type=record.get("mime_type", "audio/wav"),
        )
        return cls(
            name=record["name"],
            audio=audio,
            descriptor=SoundDescriptor.from_mapping(record["descriptor"]),
            timestamp=int(record["timestamp"]),
            key=record.get("key"),
        )


class SoundLibrary:
    """Persists generated sounds with their descriptors in one JSON file.

    The file owns the serialized form; callers only see SavedSound values.
    Records that no longer decode are skipped on load but kept on disk, and
    a file that cannot be parsed is never overwritten.

    Usage::

        library = SoundLibrary("output/sounds.json")
        library.save("UISound_Q_1700000000000.wav", audio, desc, key="Q")
        for sound in library.load():
            print(sound.name)
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> list:
        """Raw records on disk. Raises :class:`LibraryError` if unparseable."""
        if not self.path.exists():
            return []
        try:
            records = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise LibraryError(f"cannot read saved sounds from {self.path}: {exc}") from exc
        if not isinstance(records, list):
            raise LibraryError(f"{self.path} does not hold a list of sounds")
        return records

    def _write(self, records: list) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(records), encoding="utf-8")
        tmp.replace(self.path)

    def load(self) -> list[SavedSound]:
        """All saved sounds, oldest first.

        An unparseable file loads as empty; records that fail to decode are
        logged and skipped.
        """
        if not self.path.exists():
            logger.debug("No saved sounds at %s", self.path)
            return []
        try:
            records = self._read()
        except LibraryError as exc:
            logger.error("%s", exc)
            return []

        sounds = []
        for i, record in enumerate(records):
            try:
                sounds.append(SavedSound.from_record(record))
            except (ValueError, KeyError, TypeError, UISoundError) as exc:
                logger.warning("Skipping saved sound #%d in %s: %s", i, self.path, exc)
        logger.debug("Loaded %d of %d saved sounds", len(sounds), len(records))
        return sounds

    def save(
        self,
        name: str,
        audio: EncodedAudio,
        descriptor: SoundDescriptor,
        timestamp: int | None = None,
        key: str | None = None,
    ) -> bool:
        """Append a sound. Returns ``False`` if one with the same name and size exists.

        Raises :class:`LibraryError` rather than replace an unparseable file.
        """
        records = self._read()
        if any(
            _record_name(r) == name and _record_size(r) == len(audio) for r in records
        ):
            logger.info("Sound %s already saved, skipping", name)
            return False

        if timestamp is None:
            timestamp = now_ms()
        records.append(SavedSound(name, audio, descriptor, timestamp, key).to_record())
        self._write(records)
        logger.info("Saved %s (%d bytes, %d total)", name, len(audio), len(records))
        return True

    def delete(self, name: str) -> bool:
        """Remove every sound called ``name``. Returns whether anything was removed.

        Raises :class:`LibraryError` rather than replace an unparseable file.
        """
        records = self._read()
        kept = [r for r in records if _record_name(r) != name]
        if len(kept) == len(records):
            return False
        if kept:
            self._write(kept)
        else:
            self.path.unlink(missing_ok=True)
        logger.info("Deleted %s", name)
        return True

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
        logger.info("Cleared saved sounds at %s", self.path)


def _record_name(record) -> str | None:
    return record.get("name") if isinstance(record, dict) else None


def _record_size(record) -> int | None:
    try:
        return len(base64.b64decode(record["blob_data"], validate=True))
    except (KeyError, TypeError, ValueError):
        return None
