"""仪表盘配置服务."""
