"""rolematrix - role and permission matrix for ERP administration."""

__version__ = "0.1.0"
