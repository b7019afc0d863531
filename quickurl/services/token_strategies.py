"""
Token generation strategies for QuickURL.
Uses Strategy Pattern to allow different generation algorithms.

Strategies only propose candidates. Uniqueness is decided by the store,
which rejects a taken token atomically; URLService retries on collision.
"""

import random
import secrets
import string
from abc import ABC, abstractmethod


TOKEN_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


class TokenStrategy(ABC):
    """Abstract base class for token generation strategies"""

    def __init__(self, length: int = 6):
        if length <= 0:
            raise ValueError(f"Token length must be positive, got {length}")
        self.length = length

    @abstractmethod
    def generate(self) -> str:
        """
        Generate a candidate token.

        Returns:
            A string of `length` characters from TOKEN_ALPHABET
        """
        pass


class RandomTokenStrategy(TokenStrategy):
    """
    Random alphanumeric tokens from the `random` module.

    Pros: Simple, fast
    Cons: Predictable to anyone who can recover the PRNG state
    """

    def generate(self) -> str:
        return ''.join(random.choice(TOKEN_ALPHABET) for _ in range(self.length))


class SecureTokenStrategy(TokenStrategy):
    """
    Random alphanumeric tokens from the OS CSPRNG (`secrets`).

    Pros: Tokens cannot be guessed from previously issued ones
    Cons: Slightly slower than RandomTokenStrategy
    """

    def generate(self) -> str:
        return ''.join(secrets.choice(TOKEN_ALPHABET) for _ in range(self.length))
