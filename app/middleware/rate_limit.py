from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request, Response
import redis
from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Redis connection for rate limiting
try:
    redis_client = redis.Redis(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        decode_responses=True,
        retry_on_timeout=True,
        socket_connect_timeout=5,
        socket_timeout=5
    )
    # Test connection
    redis_client.ping()
    logger.info(f"Rate limiting Redis connected: {settings.REDIS_HOST}:{settings.REDIS_PORT}")
except Exception as e:
    logger.warning(f"Rate limiting Redis connection failed: {e}. Using in-memory fallback.")
    redis_client = None

def get_user_id_or_ip(request: Request):
    """
    Get user ID set by get_current_user or fall back to IP address.
    """
    user_id = getattr(request.state, 'user_id', None)
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_remote_address(request)}"

# Create limiter instance
limiter = Limiter(
    key_func=get_user_id_or_ip,
    storage_uri=f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}" if redis_client else "memory://",
    default_limits=["1000/hour"]  # Global default limit
)

# Rate limiting configurations for different endpoints
RATE_LIMITS = {
    "messages": "60/minute",
    "app_backgrounded": "30/minute",
    "evaluations": "20/minute",
}

def get_rate_limit_for_endpoint(endpoint: str) -> str:
    """Get rate limit configuration for specific endpoint."""
    return RATE_LIMITS.get(endpoint, "100/hour")

async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """
    Custom rate limit exceeded handler with helpful error messages.
    """
    return Response(
        content=f"Rate limit exceeded: {exc.detail}. Please try again later.",
        status_code=429,
        headers={"Retry-After": "60"},
    )

def rate_limit_messages(func):
    """Rate limit for posting room messages."""
    return limiter.limit(get_rate_limit_for_endpoint("messages"))(func)

def rate_limit_app_backgrounded(func):
    """Rate limit for the app-backgrounded callable."""
    return limiter.limit(get_rate_limit_for_endpoint("app_backgrounded"))(func)

def rate_limit_evaluations(func):
    """Rate limit for AI answer evaluation."""
    return limiter.limit(get_rate_limit_for_endpoint("evaluations"))(func)
