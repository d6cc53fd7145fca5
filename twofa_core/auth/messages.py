"""
User-facing messages.

Existing clients match on substrings of these strings: "OTP sent" advances
to the OTP step, "successful" and "invalid" (case-insensitive) pick the
presentation style. Keep those substrings intact, and keep them out of
messages where they would mislead. New clients should switch on the
``status`` field instead.
"""

REGISTERED = "User registered successfully"
USERNAME_TAKEN = "User already exists"
REGISTRATION_FAILED = "Registration failed. Please try again."

CREDENTIALS_REQUIRED = "Username and password required"
INVALID_CREDENTIALS = "Invalid credentials"
OTP_SENT = "Password verified. OTP sent (check backend console)."
OTP_DELIVERY_FAILED = "Failed to send OTP. Please try again."

OTP_REQUIRED = "Username and OTP required"
AUTHENTICATED = "Login successful"
OTP_INVALID = "Invalid OTP"
OTP_EXPIRED = "OTP expired or not found. Login again."

RESET = "Back to login"
SERVICE_UNAVAILABLE = "Service temporarily unavailable. Please try again shortly."
BACKEND_RUNNING = "Backend is running ✅"
INVALID_JSON = "Invalid JSON"
INTERNAL_ERROR = "Something went wrong. Please try again."
