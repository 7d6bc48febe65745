"""Two-phase export of a trimmed selection: prepare a clip, then save it externally."""

from __future__ import annotations

import datetime as dt
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Protocol, Sequence

log = logging.getLogger(__name__)

_MB = 1024 * 1024
_COPY_CHUNK = 4 * _MB
_MIN_ESTIMATE_BYTES = 200 * _MB
EXPORT_DIR_NAME = "CamVigilExports"

Runner = Callable[[str, Sequence[str]], "tuple[int, str]"]


class ExportError(Exception):
    """An export phase failed or was canceled."""


class _SegLike(Protocol):
    path: str
    start_ns: int
    end_ns: int


@dataclass
class ExportOptions:
    ffmpeg_path: str = "ffmpeg"
    out_dir: str = ""
    base_name: str = ""
    precise: bool = False
    vcodec: str = "libx264"
    preset: str = "veryfast"
    crf: int = 18
    copy_audio: bool = True
    min_free_bytes: int = 512 * _MB


@dataclass(frozen=True)
class ClipPart:
    """The part of one file that falls inside the selection, in file-relative ns."""

    path: str
    in_start_ns: int
    in_end_ns: int
    whole_file: bool


def _sec(ns: int) -> float:
    return ns / 1e9


def _emit(callback: Callable[..., Any] | None, *args: Any) -> None:
    if callback is not None:
        callback(*args)


def write_concat_list(input_paths: Iterable[str], list_path: str | os.PathLike[str]) -> None:
    """Write a concat-demuxer input list with single quotes escaped."""
    with open(list_path, "w", encoding="utf-8") as f:
        for p in input_paths:
            escaped = os.path.abspath(p).replace("'", "\\'")
            f.write(f"file '{escaped}'\n")


class Exporter:
    """Cuts a selection out of a day's playlist and copies the result to external media.

    External tools are run through ``runner(program, args)``, which returns
    ``(exit_code, stderr_text)``. Events go out through the optional callbacks
    ``started``, ``log``, ``progress``, ``prepared`` and ``saved``.
    """

    def __init__(
        self,
        options: ExportOptions | None = None,
        runner: Runner | None = None,
        temp_root: str | os.PathLike[str] | None = None,
    ) -> None:
        self.options = options if options is not None else ExportOptions()
        self.runner = runner
        self.temp_root = str(temp_root) if temp_root is not None else tempfile.gettempdir()
        self._playlist: list[_SegLike] = []
        self._day_start_ns = 0
        self._sel_start_ns = 0
        self._sel_end_ns = 0
        self._aborted = False
        self.prepared_path = ""

        self.started: Callable[[], Any] | None = None
        self.log: Callable[[str], Any] | None = None
        self.progress: Callable[[float], Any] | None = None
        self.prepared: Callable[[str], Any] | None = None
        self.saved: Callable[[str], Any] | None = None

    def set_playlist(self, playlist: Iterable[_SegLike], day_start_ns: int) -> None:
        self._playlist = list(playlist)
        self._day_start_ns = day_start_ns

    def set_selection(self, start_ns: int, end_ns: int) -> None:
        """Selection in nanoseconds since midnight."""
        self._sel_start_ns = start_ns
        self._sel_end_ns = end_ns

    def cancel(self) -> None:
        self._aborted = True

    @property
    def canceled(self) -> bool:
        return self._aborted

    def _log(self, line: str) -> None:
        log.info(line)
        _emit(self.log, line)

    def compute_parts(self) -> list[ClipPart]:
        sel_a = self._day_start_ns + self._sel_start_ns
        sel_b = self._day_start_ns + self._sel_end_ns
        parts: list[ClipPart] = []
        for fs in self._playlist:
            a = max(fs.start_ns, sel_a)
            b = min(fs.end_ns, sel_b)
            if b > a:
                whole = a == fs.start_ns and b == fs.end_ns
                parts.append(ClipPart(fs.path, a - fs.start_ns, b - fs.start_ns, whole))
            if fs.end_ns >= sel_b:
                break
        return parts

    def output_basename(self, today: dt.date) -> str:
        base = self.options.base_name
        if not base:
            return f"CamVigil_{today:%Y-%m-%d}.mp4"
        return base if base.endswith(".mp4") else base + ".mp4"

    def cut_args(self, part: ClipPart, output_path: str) -> list[str]:
        opts = self.options
        ss = _sec(part.in_start_ns)
        to = _sec(part.in_end_ns)
        args = ["-hide_banner", "-y"]
        if opts.precise:
            coarse = max(0.0, ss - 3.0)
            args += [
                "-ss", f"{coarse:.3f}",
                "-i", part.path,
                "-ss", f"{ss - coarse:.6f}",
                "-to", f"{to - coarse:.6f}",
                "-c:v", opts.vcodec,
                "-preset", opts.preset,
                "-crf", str(opts.crf),
                "-pix_fmt", "yuv420p",
                "-fflags", "+genpts",
                "-reset_timestamps", "1",
            ]
            if opts.copy_audio:
                args += ["-c:a", "copy"]
            else:
                args += ["-c:a", "aac", "-b:a", "128k"]
            args += ["-movflags", "+faststart", output_path]
        else:
            args += [
                "-ss", f"{ss:.6f}",
                "-to", f"{to:.6f}",
                "-i", part.path,
                "-c", "copy",
                "-avoid_negative_ts", "make_zero",
                output_path,
            ]
        return args

    def concat_args(self, list_path: str, out_path: str) -> list[str]:
        opts = self.options
        args = ["-hide_banner", "-y", "-f", "concat", "-safe", "0", "-i", list_path]
        if opts.precise:
            args += ["-c:v", opts.vcodec, "-preset", opts.preset, "-crf", str(opts.crf)]
            if opts.copy_audio:
                args += ["-c:a", "copy"]
        else:
            args += ["-c", "copy"]
        args.append(out_path)
        return args

    def estimate_bytes(self, parts: Iterable[ClipPart]) -> int:
        dur = sum(_sec(p.in_end_ns - p.in_start_ns) for p in parts)
        v_bps = 6.0e6 if self.options.precise else 4.0e6
        a_bps = 128.0e3
        return max(int((v_bps + a_bps) * dur / 8.0), _MIN_ESTIMATE_BYTES)

    def _run(self, args: Sequence[str]) -> tuple[bool, str]:
        if self._aborted or self.runner is None:
            return False, "" if self._aborted else "no tool runner configured"
        code, err = self.runner(self.options.ffmpeg_path, list(args))
        return code == 0, err

    def _build_inputs(self, parts: Sequence[ClipPart], temp_dir: str) -> list[str]:
        total = len(parts)
        inputs: list[str] = []
        for i, part in enumerate(parts):
            if self._aborted:
                raise ExportError("Prepare inputs failed")
            if part.whole_file:
                inputs.append(os.path.abspath(part.path))
                continue
            cut = os.path.join(temp_dir, f"part_{i:04d}.mkv")
            inputs.append(cut)
            self._log(f"[Export] cut {i + 1}/{total}")
            ok, err = self._run(self.cut_args(part, cut))
            if not ok:
                self._log(err)
                raise ExportError("Prepare inputs failed")
            _emit(self.progress, (i + 1) * 100.0 / (total + 1))
        return inputs

    def _concat(self, list_path: str, out_path: str) -> bool:
        self._log("[Export] concat")
        ok, err = self._run(self.concat_args(list_path, out_path))
        self._log(f"[Export] wrote {out_path}" if ok else err)
        _emit(self.progress, 100.0)
        return ok

    def prepare(self, today: dt.date | None = None) -> str:
        """Cut and join the selection into a clip in the temp area; return its path."""
        _emit(self.started)
        self._log("[Export] prepare start")
        self.prepared_path = ""

        if self._sel_end_ns <= self._sel_start_ns:
            raise ExportError("Invalid selection")
        if not self._playlist:
            raise ExportError("No playlist")
        parts = self.compute_parts()
        if not parts:
            raise ExportError("Selection overlaps no files")

        base = self.output_basename(today if today is not None else dt.date.today())
        try:
            tmp = tempfile.TemporaryDirectory(dir=self.temp_root)
        except OSError as exc:
            raise ExportError("Temp directory creation failed") from exc

        with tmp as temp_dir:
            self._log(f"[Export] tmp: {temp_dir}")
            inputs = self._build_inputs(parts, temp_dir)
            if self._aborted:
                raise ExportError("Canceled")

            list_path = os.path.join(temp_dir, "concat_inputs.txt")
            try:
                write_concat_list(inputs, list_path)
            except OSError as exc:
                raise ExportError("Concat list write failed") from exc

            tmp_out = os.path.join(temp_dir, base)
            if not self._concat(list_path, tmp_out):
                raise ExportError("Concat failed")
            if self._aborted:
                raise ExportError("Canceled")

            durable = os.path.join(self.temp_root, base)
            try:
                Path(durable).unlink(missing_ok=True)
                shutil.copyfile(tmp_out, durable)
            except OSError as exc:
                raise ExportError("Failed to persist prepared clip") from exc

        self.prepared_path = durable
        _emit(self.progress, 100.0)
        self._log(f"[Export] prepared -> {durable}")
        _emit(self.prepared, durable)
        return durable

    def save_to_external(self, external_root: str | None, free_bytes: int) -> str:
        """Copy the prepared clip onto external media; return the destination path."""
        _emit(self.started)
        self._log("[Export] save start")

        if not self.prepared_path or not os.path.exists(self.prepared_path):
            raise ExportError("No prepared clip to save")
        if not external_root:
            raise ExportError("No external media detected")

        out_dir = self.options.out_dir or os.path.join(external_root, EXPORT_DIR_NAME)
        try:
            os.makedirs(out_dir, exist_ok=True)
        except OSError as exc:
            raise ExportError("Cannot create output directory on external media") from exc

        size = os.path.getsize(self.prepared_path)
        need = max(self.options.min_free_bytes, size)
        self._log(f"[Export] size={size // _MB} MB, free={free_bytes // _MB} MB")
        if free_bytes < need:
            raise ExportError(f"Not enough free space. Need ≥ {need // _MB} MB")

        dst = os.path.join(out_dir, os.path.basename(self.prepared_path))
        Path(dst).unlink(missing_ok=True)

        try:
            src = open(self.prepared_path, "rb")
        except OSError as exc:
            raise ExportError("Open source failed") from exc
        with src:
            try:
                out = open(dst, "wb")
            except OSError as exc:
                raise ExportError("Open destination failed") from exc
            written = 0
            failure: str | None = None
            with out:
                while True:
                    if self._aborted:
                        failure = "Canceled"
                        break
                    try:
                        chunk = src.read(_COPY_CHUNK)
                    except OSError:
                        failure = "Read error"
                        break
                    if not chunk:
                        break
                    try:
                        out.write(chunk)
                    except OSError:
                        failure = "Write error"
                        break
                    written += len(chunk)
                    _emit(self.progress, written / size * 100.0 if size else 100.0)
            if failure is not None:
                Path(dst).unlink(missing_ok=True)
                raise ExportError(failure)

        _emit(self.progress, 100.0)
        self._log(f"[Export] saved -> {dst}")
        _emit(self.saved, dst)
        return dst