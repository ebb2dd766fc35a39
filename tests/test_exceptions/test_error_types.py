"""异常测试

测试异常层级、错误码与字典转换。
"""

import pytest

from yredis.exceptions import (
    ConnectFailed,
    ConnectionNotLeased,
    InvalidLockTTL,
    PoolClosed,
    PoolError,
    PoolExhausted,
    RedisClientError,
    ScriptExecutionError,
)


class TestHierarchy:
    """异常层级测试"""

    @pytest.mark.parametrize("error", [
        PoolExhausted(10, 5.0),
        ConnectFailed("127.0.0.1:6379/0", "refused"),
        PoolClosed(),
        ConnectionNotLeased(),
    ])
    def test_pool_errors(self, error):
        assert isinstance(error, PoolError)
        assert isinstance(error, RedisClientError)

    def test_script_error_is_not_pool_error(self):
        error = ScriptExecutionError("acquire", RuntimeError("boom"))

        assert not isinstance(error, PoolError)
        assert "boom" in str(error)

    def test_invalid_ttl_is_value_error(self):
        with pytest.raises(ValueError):
            raise InvalidLockTTL(0)


class TestErrorDetails:
    """错误详情测试"""

    def test_default_code_is_class_name(self):
        assert RedisClientError("x").code == "RedisClientError"
        assert PoolClosed().code == "PoolClosed"

    def test_to_dict(self):
        error = PoolExhausted(10, 5.0)

        assert error.to_dict() == {
            "error": "PoolExhausted",
            "message": error.message,
            "details": {"max_total": 10, "max_wait": 5.0},
        }

    def test_connect_failed_attributes(self):
        error = ConnectFailed("cache:6379/0", "auth failed")

        assert error.address == "cache:6379/0"
        assert error.reason == "auth failed"
        assert "cache:6379/0" in error.message

    def test_custom_code_and_details(self):
        error = RedisClientError("failed", code="CUSTOM", details={"key": "k"})

        assert error.to_dict()["error"] == "CUSTOM"
        assert error.to_dict()["details"] == {"key": "k"}

    def test_repr(self):
        assert repr(PoolClosed()).startswith("PoolClosed(message=")

    def test_invalid_ttl_details(self):
        error = InvalidLockTTL(-1)

        assert error.ttl == -1
        assert error.details == {"ttl": "-1"}
