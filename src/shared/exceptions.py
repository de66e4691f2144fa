class QACoreError(Exception):
    """问答核心所有业务异常的基类"""


class ValidationError(QACoreError):
    """输入校验失败（在任何 I/O 之前抛出，不重试）"""


class NotFoundError(QACoreError):
    """操作的目标记录不存在"""


class NotAuthorizedError(QACoreError):
    """当前用户无权操作该记录"""


class ConstraintViolation(QACoreError):
    """唯一约束冲突，通常由并发竞争引起，可视为暂时性失败"""


class StoreError(QACoreError):
    """存储层连接或事务失败"""
