"""
JSON 文件读写工具模块。
"""

import json
import os
from pathlib import Path
from typing import Any


def atomic_save_json(file_path: Path, data: Any, indent: int = 2) -> None:
    """
    原子保存 JSON 数据到文件，防止写入中断导致文件损坏。

    参数:
        file_path: 目标文件路径
        data: 要保存的数据
        indent: JSON 缩进
    """
    temp_path = file_path.with_suffix(file_path.suffix + ".tmp")

    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
        os.replace(temp_path, file_path)
    except Exception:
        if temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise


def load_json(file_path: Path) -> Any:
    """
    读取 JSON 文件。

    参数:
        file_path: 文件路径

    返回:
        解析后的数据

    抛出:
        OSError: 文件无法读取
        ValueError: 内容不是合法的 UTF-8 JSON（含 json.JSONDecodeError）
    """
    with open(file_path, "r", encoding="utf-8") as f:
        return json.load(f)
