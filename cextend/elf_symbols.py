"""Symbol names for code addresses, read from ELF symbol tables."""

from __future__ import annotations

import re
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEFAULT_MAPS_PATH = "/proc/self/maps"

_EI_CLASS = 4
_EI_DATA = 5
_ELFCLASS32 = 1
_ELFCLASS64 = 2
_ELFDATA2LSB = 1
_ELFDATA2MSB = 2

_SHT_SYMTAB = 2
_SHT_STRTAB = 3
_SHT_DYNSYM = 11

_STT_OBJECT = 1
_STT_FUNC = 2


@dataclass(frozen=True)
class Symbol:
    address: int
    kind: str
    name: str


@dataclass
class SymbolFile:
    fname: str
    symbols: list[Symbol] = field(default_factory=list)

    def best_symbol(self, address: int) -> Optional[str]:
        """Name of the closest symbol at or below ``address``.

        On equal addresses the symbol added first wins.
        """
        best_addr = 0
        best_name = None
        for sym in reversed(self.symbols):
            if best_addr <= sym.address <= address:
                best_addr = sym.address
                best_name = sym.name
        return best_name


@dataclass(frozen=True)
class _Section:
    name: int
    type: int
    offset: int
    size: int


def _cstring(data: bytes, start: int) -> str:
    if start >= len(data):
        return ""
    end = data.find(b"\0", start)
    if end < 0:
        end = len(data)
    return data[start:end].decode("utf-8", errors="replace")


def _read_sections(data: bytes, elf_class: int, endian: str) -> tuple[list[_Section], int]:
    if elf_class == _ELFCLASS64:
        header = struct.unpack_from(endian + "16sHHIQQQIHHHHHH", data)
        shdr = struct.Struct(endian + "IIQQQQIIQQ")
    else:
        header = struct.unpack_from(endian + "16sHHIIIIIHHHHHH", data)
        shdr = struct.Struct(endian + "IIIIIIIIII")
    shoff, shnum, shstrndx = header[6], header[12], header[13]
    raw = data[shoff : shoff + shnum * shdr.size]
    sections = [
        _Section(fields[0], fields[1], fields[4], fields[5])
        for fields in shdr.iter_unpack(raw)
    ]
    if len(sections) != shnum:
        raise struct.error("truncated section header table")
    return sections, sections[shstrndx].offset


def _find_strtab(
    data: bytes, sections: list[_Section], shstrtab: int, name: str
) -> Optional[_Section]:
    return next(
        (
            s
            for s in sections
            if s.type == _SHT_STRTAB and _cstring(data, shstrtab + s.name) == name
        ),
        None,
    )


def _find_type(sections: list[_Section], sh_type: int) -> Optional[_Section]:
    return next((s for s in sections if s.type == sh_type), None)


def _read_symbols(
    data: bytes, elf_class: int, endian: str, symtab: _Section, strtab: _Section
) -> list[Symbol]:
    if elf_class == _ELFCLASS64:
        entry = struct.Struct(endian + "IBBHQQ")

        def fields(raw):
            return raw[0], raw[1], raw[4]
    else:
        entry = struct.Struct(endian + "IIIBBH")

        def fields(raw):
            return raw[0], raw[3], raw[1]

    count = symtab.size // entry.size
    raw_table = data[symtab.offset : symtab.offset + count * entry.size]
    if len(raw_table) != count * entry.size:
        raise struct.error("truncated symbol table")
    symbols = []
    for raw in entry.iter_unpack(raw_table):
        name_off, info, value = fields(raw)
        sym_type = info & 0xF
        if sym_type not in (_STT_FUNC, _STT_OBJECT) or not name_off:
            continue
        name = _cstring(data, strtab.offset + name_off)
        if name:
            symbols.append(Symbol(value, "T" if sym_type == _STT_FUNC else "D", name))
    return symbols


def parse_elf_symbols(data: bytes) -> list[Symbol]:
    """Function and object symbols of an ELF image, in table order.

    Uses ``.symtab``/``.strtab``, falling back to ``.dynsym``/``.dynstr``.
    Data that is not a readable ELF image gives an empty list.
    """
    if len(data) <= _EI_DATA:
        return []
    elf_class = data[_EI_CLASS]
    if elf_class not in (_ELFCLASS32, _ELFCLASS64):
        return []
    endian = {_ELFDATA2LSB: "<", _ELFDATA2MSB: ">"}.get(data[_EI_DATA], "=")
    try:
        sections, shstrtab = _read_sections(data, elf_class, endian)
        symtab = _find_type(sections, _SHT_SYMTAB)
        strtab = _find_strtab(data, sections, shstrtab, ".strtab")
        if symtab is None or strtab is None:
            symtab = _find_type(sections, _SHT_DYNSYM)
            strtab = _find_strtab(data, sections, shstrtab, ".dynstr")
        if symtab is None or strtab is None:
            return []
        return _read_symbols(data, elf_class, endian, symtab, strtab)
    except (struct.error, IndexError):
        return []


_MAPS_RE = re.compile(r"\s*([0-9a-fA-F]+)-\s*([0-9a-fA-F]+)\s+\S+\s+([0-9a-fA-F]+)")


def parse_maps_line(line: str) -> Optional[tuple[int, int, int, str]]:
    """Split a memory-map line into ``(start, end, offset, path)``."""
    space = line.rfind(" ")
    if space < 0:
        return None
    match = _MAPS_RE.match(line)
    if match is None:
        return None
    start, end, offset = (int(group, 16) for group in match.groups())
    path = line[space + 1 :].split("\n", 1)[0]
    return start, end, offset, path


def _same_file(a: str, b: str) -> bool:
    try:
        return Path(a).resolve(strict=True) == Path(b).resolve(strict=True)
    except (OSError, RuntimeError, ValueError):
        return False


def find_mapping(
    fname: str, address: int, maps_path: str = DEFAULT_MAPS_PATH
) -> Optional[tuple[int, int]]:
    """Base and file offset of the mapping of ``fname`` holding ``address``."""
    try:
        with open(maps_path, encoding="utf-8", errors="replace") as maps:
            for line in maps:
                parsed = parse_maps_line(line)
                if parsed is None:
                    continue
                start, end, offset, path = parsed
                if _same_file(path, fname) and start <= address < end:
                    return start, offset
    except OSError:
        return None
    return None


class SymbolCache:
    """Symbol tables of the files looked up so far."""

    def __init__(self, maps_path: str = DEFAULT_MAPS_PATH) -> None:
        self.maps_path = maps_path
        self._files: dict[str, SymbolFile] = {}

    @property
    def files(self) -> dict[str, SymbolFile]:
        return dict(self._files)

    def add_symbol(self, fname: str, address: int, kind: str, name: str) -> None:
        self._files.setdefault(fname, SymbolFile(fname)).symbols.append(
            Symbol(address, kind, name)
        )

    def build(self, fname: str) -> None:
        """Read the symbols of ``fname``; unreadable files are ignored."""
        try:
            data = Path(fname).read_bytes()
        except OSError:
            return
        for sym in parse_elf_symbols(data):
            self.add_symbol(fname, sym.address, sym.kind, sym.name)

    def lookup(
        self, address: int, fname: str, maps_path: Optional[str] = None
    ) -> Optional[str]:
        """Name of the symbol of ``fname`` covering the runtime ``address``."""
        if not self._files:
            return None
        mapping = find_mapping(fname, address, maps_path or self.maps_path)
        if mapping is None:
            return None
        base, offset = mapping
        file = self._files.get(fname)
        if file is None:
            return None
        return file.best_symbol(address - base + offset)

    def do_nm(self, address: int, fname: str) -> str:
        """Symbol name for ``address`` in ``fname``, or ``"???"``."""
        if fname not in self._files:
            self.build(fname)
        return self.lookup(address, fname) or "???"


_cache = SymbolCache()


def do_nm(address: int, fname: str) -> str:
    return _cache.do_nm(address, fname)