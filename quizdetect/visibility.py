"""
quizdetect.visibility
可见性判定的共享部分：内联样式解析、隐藏样式谓词、不渲染标签集合，
以及供 Playwright 绑定在页面端执行的 JS 版本。

判定规则（两端一致）：
- display:none / visibility:hidden / opacity:0 → 不可见；
- 自身或祖先带 hidden 属性 → 不可见；
- 没有任何渲染盒（getClientRects 为空）→ 不可见。
"""

from __future__ import annotations

from typing import Dict, Optional

# 永远不产生渲染盒的标签
NON_RENDERED_TAGS = {
    "head", "script", "style", "template", "noscript", "meta", "link", "title",
}

# 在页面端执行；入参为元素，返回 bool
VISIBILITY_JS = """
(el) => {
  if (!el) return false;
  const style = window.getComputedStyle(el);
  if (style.display === 'none' || style.visibility === 'hidden' || style.opacity === '0') return false;
  if (el.closest('[hidden]')) return false;
  return el.getClientRects().length > 0;
}
"""


def parse_inline_style(style: Optional[str]) -> Dict[str, str]:
    """将 style 属性解析为 {属性名: 值}（均小写、去空白；!important 去掉）。"""
    out: Dict[str, str] = {}
    for decl in (style or "").split(";"):
        if ":" not in decl:
            continue
        k, v = decl.split(":", 1)
        k = k.strip().lower()
        v = v.strip().lower().replace("!important", "").strip()
        if k:
            out[k] = v
    return out


def _is_zero(value: str) -> bool:
    try:
        return float(value) == 0.0
    except ValueError:
        return False


def hides_self(style: Dict[str, str]) -> bool:
    """display:none / visibility:hidden / opacity:0 之一成立。"""
    if style.get("display") == "none":
        return True
    if style.get("visibility") in ("hidden", "collapse"):
        return True
    op = style.get("opacity")
    if op is not None and _is_zero(op):
        return True
    return False


def removes_box(style: Dict[str, str]) -> bool:
    """祖先上会让整棵子树失去渲染盒的样式（仅 display:none）。

    visibility 可被子节点覆盖，opacity 不影响盒子，因此这里只看 display。
    """
    return style.get("display") == "none"
