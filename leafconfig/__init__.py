"""LeafConfig - Flask 应用初始化.

Nissan Leaf 车载模块的参数表单服务: 整批校验,全部通过后原子提交.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from flask import Flask, jsonify, request
from flask.typing import ResponseReturnValue
from flask_sqlalchemy import SQLAlchemy

from leafconfig.settings import Settings
from leafconfig.utils.response_utils import unified_error_response
from leafconfig.utils.structlog_config import ErrorContext, configure_structlog

# 初始化扩展
db = SQLAlchemy()

PROCESSOR_EXTENSION_KEY = "parameter_form_processor"


def create_app(*, settings: Settings | None = None) -> Flask:
    """创建Flask应用实例.

    Args:
        settings: 可选的配置对象,用于测试或多环境启动.

    Returns:
        Flask: Flask应用实例

    """
    resolved_settings = settings or Settings.load()
    app = Flask(__name__)

    # 配置应用
    configure_app(app, resolved_settings)

    # 初始化扩展与参数表单处理器
    initialize_extensions(app, resolved_settings)

    # 注册蓝图
    configure_blueprints(app, resolved_settings)

    # 配置日志
    configure_logging(app)

    # 配置统一日志系统
    configure_structlog(app)

    # 设置全局日志级别
    log_level_name = str(app.config.get("LOG_LEVEL", "INFO"))
    logging.getLogger().setLevel(getattr(logging, log_level_name, logging.INFO))

    # 注册全局错误处理器
    @app.errorhandler(Exception)
    def handle_global_exception(error: Exception) -> ResponseReturnValue:
        """全局错误处理."""
        payload, status_code = unified_error_response(error, context=ErrorContext(error, request))
        return jsonify(payload), status_code

    return app


def configure_app(app: Flask, settings: Settings) -> None:
    """写入 Settings 提供的配置.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象,包含环境变量解析、默认值与校验结果.

    Returns:
        None: 写入 `app.config` 后返回.

    """
    app.config.from_mapping(settings.to_flask_config())
    app.config.setdefault("APPLICATION_ROOT", "/")


def initialize_extensions(app: Flask, settings: Settings) -> None:
    """初始化数据库并装配参数表单处理器.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象,提供车型默认值.

    Returns:
        None: 扩展完成初始化后返回.

    """
    from leafconfig.repositories.config_params_repository import ConfigParamsRepository  # noqa: PLC0415
    from leafconfig.services.form_service.parameter_form_service import ParameterFormProcessor  # noqa: PLC0415
    from leafconfig.services.form_service.schema_registry import SchemaRegistry  # noqa: PLC0415

    db.init_app(app)
    with app.app_context():
        db.create_all()

    app.extensions[PROCESSOR_EXTENSION_KEY] = ParameterFormProcessor(
        ConfigParamsRepository(),
        SchemaRegistry.from_settings(settings),
    )


def configure_blueprints(app: Flask, settings: Settings) -> None:
    """注册 API 蓝图与请求日志钩子.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象.

    Returns:
        None: 蓝图全部注册后返回.

    """
    from leafconfig.api import register_api_blueprints  # noqa: PLC0415
    from leafconfig.infra.logging.request_middleware import register_request_logging  # noqa: PLC0415

    register_request_logging(app)
    register_api_blueprints(app, settings)


def configure_logging(app: Flask) -> None:
    """配置日志系统与文件处理器.

    Args:
        app: Flask 应用实例.

    Returns:
        None: 日志处理器挂载完毕后返回.

    """
    if not app.debug and not app.testing:
        log_path = Path(app.config["LOG_FILE"])
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=app.config["LOG_MAX_SIZE"],
            backupCount=app.config["LOG_BACKUP_COUNT"],
        )
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]"),
        )
        file_handler.setLevel(getattr(logging, app.config["LOG_LEVEL"]))
        app.logger.addHandler(file_handler)

        app.logger.setLevel(getattr(logging, app.config["LOG_LEVEL"]))
        app.logger.info("LeafConfig 应用启动")
