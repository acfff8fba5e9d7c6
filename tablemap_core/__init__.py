"""Tablemap Core 顶层包。

该包把上传的餐厅平面图发给多模态大模型，
返回模型识别出的桌子、吧台、墙、门窗等对象的 JSON 文本。
包括配置加载、领域模型、prompt 组装、Provider 适配与 HTTP 上传接口。
"""

from tablemap_core.api.service import analyze_image

__all__ = ["analyze_image"]
