"""
持久化参数模型
"""

from leafconfig import db
from leafconfig.utils.time_utils import now, time_utils


class ConfigParam(db.Model):
    """命名空间下的单个参数值"""

    __tablename__ = "config_params"
    __table_args__ = (db.UniqueConstraint("namespace", "key", name="uq_config_params_namespace_key"),)

    id = db.Column(db.Integer, primary_key=True)
    namespace = db.Column(db.String(64), nullable=False, index=True, comment="参数命名空间")
    key = db.Column(db.String(255), nullable=False, comment="参数键")
    value = db.Column(db.Text, nullable=False, default="", comment="参数值")
    created_at = db.Column(db.DateTime(timezone=True), default=now, comment="创建时间")
    updated_at = db.Column(db.DateTime(timezone=True), default=now, onupdate=now, comment="更新时间")

    def __repr__(self) -> str:
        return f"<ConfigParam {self.namespace}/{self.key}>"

    def to_dict(self) -> dict[str, str | None]:
        """转换为字典格式"""
        return {
            "namespace": self.namespace,
            "key": self.key,
            "value": self.value,
            "created_at": time_utils.to_json_serializable(self.created_at),
            "updated_at": time_utils.to_json_serializable(self.updated_at),
        }
