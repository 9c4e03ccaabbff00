"""Recognising and extracting zip and gzipped tar archives."""

from __future__ import annotations

import os
import shutil
import tarfile
import zipfile
import zlib
from collections.abc import Callable

from meshkit.errors import err_extract_tar, err_extract_zip, err_read_dir, err_read_file

_SNIFF_LEN = 512
_WHITESPACE = b"\t\n\x0c\r "

_HTML_TAGS = (
    b"<!DOCTYPE HTML", b"<HTML", b"<HEAD", b"<SCRIPT", b"<IFRAME", b"<H1", b"<DIV",
    b"<FONT", b"<TABLE", b"<A", b"<STYLE", b"<TITLE", b"<B", b"<BODY", b"<BR", b"<P",
    b"<!--",
)
_TEXT_BOMS = (
    (b"\xfe\xff", "text/plain; charset=utf-16be"),
    (b"\xff\xfe", "text/plain; charset=utf-16le"),
    (b"\xef\xbb\xbf", "text/plain; charset=utf-8"),
)
# Signatures made of text-like bytes that win over plain text.
_OTHER_PREFIXES = (
    b"%PDF-", b"%!PS-Adobe-", b"GIF87a", b"GIF89a", b"BM", b"ID3", b".snd",
    b"\xff\xd8\xff", b"wOFF", b"wOF2", b"OTTO", b"ttcf",
)
_GZIP = b"\x1f\x8b\x08"
_ZIP = b"PK\x03\x04"


def _is_binary_byte(value: int) -> bool:
    return value <= 0x08 or value == 0x0B or 0x0E <= value <= 0x1A or 0x1C <= value <= 0x1F


def _is_html(data: bytes) -> bool:
    for tag in _HTML_TAGS:
        if len(data) < len(tag) + 1:
            continue
        head = bytes(b & 0xDF if 0x41 <= t <= 0x5A else b for b, t in zip(data, tag))
        if head == tag and data[len(tag)] in b" >":
            return True
    return False


def _is_other_media(data: bytes) -> bool:
    if data.startswith(_OTHER_PREFIXES):
        return True
    if data[:4] == b"RIFF" and (data[8:12] in (b"WAVE", b"AVI ") or data[8:14] == b"WEBPVP"):
        return True
    return data[:4] == b"FORM" and data[8:12] == b"AIFF"


def _content_type(data: bytes) -> str:
    stripped = data.lstrip(_WHITESPACE)
    if _is_html(stripped):
        return "text/html; charset=utf-8"
    if stripped.startswith(b"<?xml"):
        return "text/xml; charset=utf-8"
    for bom, kind in _TEXT_BOMS:
        if data.startswith(bom) and not _is_other_media(data):
            return kind
    if _is_other_media(data):
        return "application/octet-stream"
    if data.startswith(_GZIP):
        return "application/x-gzip"
    if data.startswith(_ZIP):
        return "application/zip"
    if not any(_is_binary_byte(value) for value in stripped):
        return "text/plain; charset=utf-8"
    return "application/octet-stream"


def _read_head(name: str | os.PathLike[str]) -> bytes | None:
    try:
        with open(name, "rb") as handle:
            head = handle.read(_SNIFF_LEN)
    except OSError:
        return None
    # The sniffed window is always full-sized; a short file is padded with zeros.
    return head.ljust(_SNIFF_LEN, b"\0")


def is_tar_gz(name: str | os.PathLike[str]) -> bool:
    """Tell whether the file's content looks like gzip data."""
    head = _read_head(name)
    return head is not None and _content_type(head) == "application/x-gzip"


def is_zip(name: str | os.PathLike[str]) -> bool:
    """Tell whether the file's content looks like a zip archive."""
    head = _read_head(name)
    return head is not None and _content_type(head) == "application/zip"


def is_yaml(name: str | os.PathLike[str]) -> bool:
    """Tell whether the file's first 512 bytes sniff as plain text."""
    head = _read_head(name)
    return head is not None and "text/plain" in _content_type(head)


def extract_zip(path: str | os.PathLike[str], artifact_path: str | os.PathLike[str]) -> None:
    """Extract the zip archive at artifact_path into the directory path."""
    try:
        archive = zipfile.ZipFile(artifact_path)
    except (OSError, zipfile.BadZipFile) as exc:
        raise err_extract_zip(exc, path) from exc
    with archive:
        for info in archive.infolist():
            target = os.path.join(path, info.filename)
            mode = (info.external_attr >> 16) & 0o777
            try:
                if info.is_dir():
                    os.mkdir(target, mode or 0o755)
                    continue
                descriptor = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode or 0o644)
                with os.fdopen(descriptor, "wb") as out, archive.open(info) as source:
                    shutil.copyfileobj(source, out)
            except (OSError, zipfile.BadZipFile, zlib.error, RuntimeError) as exc:
                raise err_extract_zip(exc, path) from exc


def _extract_member(archive: tarfile.TarFile, member: tarfile.TarInfo, path) -> None:
    target = os.path.join(path, member.name)
    if member.isdir():
        os.makedirs(target, mode=0o755, exist_ok=True)
    elif member.isreg():
        try:
            os.makedirs(os.path.join(path, os.path.dirname(member.name)), mode=0o755, exist_ok=True)
        except OSError:
            pass
        source = archive.extractfile(member)
        with open(target, "wb") as out:
            if source is not None:
                shutil.copyfileobj(source, out)
    else:
        raise err_extract_tar(ValueError(f"unsupported entry type for {member.name}"), path)


def extract_tar_gz(path: str | os.PathLike[str], archive_path: str | os.PathLike[str]) -> None:
    """Extract the gzipped tar archive at archive_path into the directory path.

    Only directories and regular files are supported.
    """
    try:
        stream = open(archive_path, "rb")
    except OSError as exc:
        raise err_read_file(exc, archive_path) from exc
    with stream:
        try:
            with tarfile.open(fileobj=stream, mode="r|gz") as archive:
                for member in archive:
                    _extract_member(archive, member, path)
        except (tarfile.TarError, OSError, EOFError, zlib.error) as exc:
            raise err_extract_tar(exc, path) from exc


def process_content(path: str | os.PathLike[str], func: Callable[[str], object]) -> None:
    """Call func on path, or on each entry of path in name order if it is a directory."""
    try:
        is_dir = os.path.isdir(path) if os.stat(path) else False
        entries = sorted(os.listdir(path)) if is_dir else None
    except OSError as exc:
        raise err_read_dir(exc, path) from exc
    if entries is None:
        func(os.fspath(path))
        return
    for entry in entries:
        func(os.path.join(path, entry))