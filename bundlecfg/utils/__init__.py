"""通用工具：错误类型、受控文件访问与结构化日志。"""
