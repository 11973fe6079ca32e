#!/usr/bin/env python3
# ascii_frame/config.py
"""
Config loader/saver and defaults for the ascii_frame pipeline.

Goals:
- Single JSON file per user.
- Safe atomic writes.
- Deep-merge of user config over defaults.
- Basic validation with sane fallbacks.
- No external deps.

Usage:
    from ascii_frame.config import Config, DEFAULT_CONFIG
    cfg = Config.load()                 # ~/.config/ascii_frame/ascii_frame.json or OS-specific
    kernel = cfg["pipeline"]["kernel"]
    cfg["render"]["palette"] = "shades"
    cfg.save()
"""

from __future__ import annotations

import copy
import json
import logging
import os
import platform
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

log = logging.getLogger(__name__)

# ----------------------------
# Defaults
# ----------------------------

DEFAULT_CONFIG: Dict[str, Any] = {
    "capture": {
        "color_format": "rgba8",         # rgba8 | bgra8 | rgba16f
    },
    "pipeline": {
        "width": 120,                    # target grid; UI may pass the measured terminal
        "height": 36,
        "scaling": "bilinear",           # nearest | bilinear
        "kernel": "sobel",               # sobel | prewitt
        "edge_overlay": True,            # mask edge map over the color frame
        "mask_threshold": 24,
        "grayscale_shades": 0,           # 0 disables, else 2..255
        "quantize_shades": 0,            # 0 disables
        "brightness": 0,                 # added to every channel
        "seams": 0,                      # columns carved (or added) after scaling
        "seam_mode": "remove",           # remove | add
        "seam_search": "greedy",         # greedy | dynamic
        "flip_horizontal": False,
        "flip_vertical": False,
    },
    "render": {
        "mode": "glyph",                 # glyph | block
        "palette": "ascii_basic",        # see rendering/glyphs.default_ramps()
        "color": True,
    },
    "logging": {
        "level": "INFO",
        "file": None,                     # path or None
        "rotate_bytes": 5 * 1024 * 1024,
        "rotate_keep": 3,
    },
}

_COLOR_FORMATS = ("rgba8", "bgra8", "rgba16f")
_SCALINGS = ("nearest", "bilinear")
_KERNELS = ("sobel", "prewitt")
_SEAM_MODES = ("remove", "add")
_SEAM_SEARCHES = ("greedy", "dynamic")
_RENDER_MODES = ("glyph", "block")

# ----------------------------
# Helpers
# ----------------------------

def _os_config_home() -> str:
    """Return per-OS config base directory."""
    if platform.system() == "Windows":
        base = os.environ.get("APPDATA") or os.path.expanduser("~\\AppData\\Roaming")
        return os.path.join(base, "AsciiFrame")
    # macOS: ~/Library/Application Support/AsciiFrame
    if platform.system() == "Darwin":
        return os.path.join(os.path.expanduser("~/Library/Application Support"), "AsciiFrame")
    # Linux and others: ~/.config/ascii_frame
    return os.path.join(os.path.expanduser("~/.config"), "ascii_frame")

def _default_config_path() -> str:
    """Resolve default config path, honoring ASCII_FRAME_CONFIG env override."""
    env = os.environ.get("ASCII_FRAME_CONFIG")
    if env:
        return os.path.expanduser(env)
    return os.path.join(_os_config_home(), "ascii_frame.json")

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """Return deep-merged copy of dicts: values in b override a."""
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def _atomic_write_json(path: str, data: Dict[str, Any]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".tmp_cfg_", dir=os.path.dirname(path) or ".")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
            f.write("\n")
        os.replace(tmp, path)
    except Exception:
        # Clean temp on error
        if os.path.exists(tmp):
            os.remove(tmp)
        raise

def _coerce_int(v: Any, default: int, minmax: Optional[Tuple[int, int]] = None) -> int:
    try:
        x = int(v)
    except (TypeError, ValueError):
        return int(default)
    if minmax:
        lo, hi = minmax
        if x < lo: x = lo
        if x > hi: x = hi
    return x

def _coerce_bool(v: Any, default: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("1", "true", "yes", "on"): return True
        if s in ("0", "false", "no", "off"): return False
    return default

def _coerce_choice(v: Any, choices: Tuple[str, ...], default: str) -> str:
    s = str(v).lower() if v is not None else ""
    return s if s in choices else default

# ----------------------------
# Validation
# ----------------------------

def _validate(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Return validated copy with fallbacks applied."""
    c = _deep_merge(copy.deepcopy(DEFAULT_CONFIG), copy.deepcopy(cfg or {}))
    d = DEFAULT_CONFIG

    # capture
    cap = c["capture"]
    cap["color_format"] = _coerce_choice(cap.get("color_format"), _COLOR_FORMATS, d["capture"]["color_format"])

    # pipeline
    p = c["pipeline"]
    dp = d["pipeline"]
    p["width"]  = _coerce_int(p.get("width"), dp["width"], (1, 2000))
    p["height"] = _coerce_int(p.get("height"), dp["height"], (1, 1000))
    p["scaling"] = _coerce_choice(p.get("scaling"), _SCALINGS, dp["scaling"])
    p["kernel"] = _coerce_choice(p.get("kernel"), _KERNELS, dp["kernel"])
    p["edge_overlay"] = _coerce_bool(p.get("edge_overlay"), dp["edge_overlay"])
    p["mask_threshold"] = _coerce_int(p.get("mask_threshold"), dp["mask_threshold"], (0, 255))
    gs = _coerce_int(p.get("grayscale_shades"), 0, (0, 255))
    p["grayscale_shades"] = gs if gs >= 2 else 0
    p["quantize_shades"] = _coerce_int(p.get("quantize_shades"), 0, (0, 255))
    p["brightness"] = _coerce_int(p.get("brightness"), 0, (-255, 255))
    p["seams"] = _coerce_int(p.get("seams"), 0, (0, 1000))
    p["seam_mode"] = _coerce_choice(p.get("seam_mode"), _SEAM_MODES, dp["seam_mode"])
    p["seam_search"] = _coerce_choice(p.get("seam_search"), _SEAM_SEARCHES, dp["seam_search"])
    for key in ("flip_horizontal", "flip_vertical"):
        p[key] = _coerce_bool(p.get(key), dp[key])

    # render
    r = c["render"]
    r["mode"] = _coerce_choice(r.get("mode"), _RENDER_MODES, d["render"]["mode"])
    r["palette"] = str(r.get("palette") or d["render"]["palette"])
    r["color"] = _coerce_bool(r.get("color"), d["render"]["color"])

    # logging
    lg = c["logging"]
    if lg.get("level") not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"):
        lg["level"] = d["logging"]["level"]
    lf = lg.get("file")
    lg["file"] = str(lf) if lf else None
    lg["rotate_bytes"] = _coerce_int(lg.get("rotate_bytes"), d["logging"]["rotate_bytes"], (256 * 1024, 50 * 1024 * 1024))
    lg["rotate_keep"]  = _coerce_int(lg.get("rotate_keep"), d["logging"]["rotate_keep"], (0, 50))

    return c

# ----------------------------
# Public API
# ----------------------------

@dataclass
class Config:
    """Thin wrapper around a nested dict with load/save/merge."""
    data: Dict[str, Any] = field(default_factory=lambda: _validate(DEFAULT_CONFIG))
    path: str = field(default_factory=_default_config_path)

    # --- Mapping-style access
    def __getitem__(self, k: str) -> Any:
        return self.data[k]

    def __setitem__(self, k: str, v: Any) -> None:
        self.data[k] = v

    def get(self, k: str, default: Any = None) -> Any:
        return self.data.get(k, default)

    # --- Ops
    @classmethod
    def load(cls, path: Optional[str] = None, create_if_missing: bool = True) -> "Config":
        cfg_path = os.path.expanduser(path) if path else _default_config_path()
        if not os.path.exists(cfg_path):
            cfg = _validate(DEFAULT_CONFIG)
            if create_if_missing:
                _atomic_write_json(cfg_path, cfg)
            return cls(cfg, cfg_path)

        try:
            with open(cfg_path, "r", encoding="utf-8") as f:
                user_cfg = json.load(f)
            if not isinstance(user_cfg, dict):
                raise ValueError("config root must be an object")
        except (OSError, ValueError):
            # Corrupt file. Backup and regenerate.
            backup = cfg_path + ".corrupt.bak"
            log.warning("Config %s unreadable, backing up to %s", cfg_path, backup)
            try:
                shutil.copyfile(cfg_path, backup)
            except OSError:
                log.warning("Could not back up %s", cfg_path)
            user_cfg = {}

        return cls(_validate(user_cfg), cfg_path)

    def save(self) -> None:
        """Persist to JSON atomically."""
        full = _validate(self.data)
        _atomic_write_json(self.path, full)
        self.data = full  # sync in-memory with normalized values

    def update(self, partial: Dict[str, Any]) -> None:
        """Deep-merge a partial config then validate."""
        merged = _deep_merge(self.data, partial)
        self.data = _validate(merged)

    def changed(self) -> Dict[str, Any]:
        """Keys that differ from DEFAULT_CONFIG."""
        return _diff(_validate(DEFAULT_CONFIG), self.data)

    # Convenience getters
    @property
    def target_size(self) -> Tuple[int, int]:
        return self.data["pipeline"]["width"], self.data["pipeline"]["height"]

    @property
    def color_format(self) -> str:
        return self.data["capture"]["color_format"]


def _diff(base: Dict[str, Any], cur: Dict[str, Any]) -> Dict[str, Any]:
    """Return nested dictionary of keys where cur differs from base."""
    out: Dict[str, Any] = {}
    for k in cur.keys() | base.keys():
        if k not in base:
            out[k] = cur[k]
            continue
        if k not in cur:
            continue
        vb = base[k]
        vc = cur[k]
        if isinstance(vb, dict) and isinstance(vc, dict):
            d = _diff(vb, vc)
            if d:
                out[k] = d
        elif vb != vc:
            out[k] = vc
    return out

__all__ = [
    "Config",
    "DEFAULT_CONFIG",
    "_default_config_path",
]
