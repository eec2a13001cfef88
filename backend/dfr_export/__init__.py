"""
X-Terra 现场报告导出 - 后端核心模块

模块结构：
- config/     运行期配置与报告版式规范加载
- models/     数据模型定义（报告内容/版面指令/工程文件解析）
- layout/     分页排版引擎（文本测量/页游标/页眉/正文/勾选/照片/地图）
- export/     图片解码、PDF写出、保存落盘与导出服务
"""

__version__ = "0.1.0"
