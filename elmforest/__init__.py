"""
Elm Forest - Elm 版本管理器与代理。

根据项目 elm-package.json 中的版本约束，自动安装并调用对应版本的 elm。
"""

__version__ = "0.1.0"
