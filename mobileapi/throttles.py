"""
Request throttles for the authentication endpoints
Rates are configured in REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']
"""
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle


class RegisterRateThrottle(AnonRateThrottle):
    scope = 'register'


class LoginRateThrottle(AnonRateThrottle):
    scope = 'login'


class EmailResendRateThrottle(UserRateThrottle):
    scope = 'email_resend'


class EmailVerifyCodeRateThrottle(UserRateThrottle):
    scope = 'email_verify_code'
