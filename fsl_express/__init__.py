"""FSL Express backend: asset search, OTP mail delivery and sign classification."""

__version__ = "1.0.1"
