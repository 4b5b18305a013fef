"""共享工具函数"""

import re
from typing import List

# <Name> 或 <Name:value>，与数据库备注栏的标签格式一致
_META_PATTERN = re.compile(r"<([^<>:]+)(:?)([^>]*)>")

# 动态文件名中的 {hp:40,60,80}
_HP_PLACEHOLDER = re.compile(r"\{hp:([^{}]*)\}", re.IGNORECASE)


def find_meta_value(note: str, tag: str) -> str:
    """从备注文本中提取指定标签的值。

    同一标签出现多次时后出现的覆盖先出现的，与数据库备注栏的解析规则一致。

    Args:
        note: 数据库备注栏原文
        tag: 标签名 (区分大小写)

    Returns:
        标签值字符串；标签不存在或没有值时返回空字符串
    """
    if not note:
        return ""
    found = ""
    for name, colon, value in _META_PATTERN.findall(note):
        if name == tag and colon:
            found = value
    return found


def has_meta(note: str, tag: str) -> bool:
    """备注文本中是否出现了指定标签 (不论是否带值)"""
    if not note:
        return False
    return any(name == tag for name, _, _ in _META_PATTERN.findall(note))


def parse_hp_thresholds(text: str) -> List[float]:
    """Parses the comma separated thresholds of a {hp:...} placeholder.

    Blank tokens are skipped; anything else must be numeric.
    """
    thresholds = []
    for token in text.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            thresholds.append(float(token))
        except ValueError:
            raise ValueError(f"Invalid hp threshold '{token}' in '{{hp:{text}}}'") from None
    return sorted(thresholds)


def check_hp_placeholders(pattern: str) -> None:
    """校验模板中所有 {hp:...} 的阈值，非数值时抛出 ValueError"""
    for arg in _HP_PLACEHOLDER.findall(pattern):
        parse_hp_thresholds(arg)
