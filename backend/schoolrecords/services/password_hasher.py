"""
Hachage des mots de passe administrateur (werkzeug.security).

Format stocké : "<méthode>$<sel>$<hash>", ex. "pbkdf2:sha256:600000$…$…".
Le sel aléatoire est intégré à chaque hash. Les installations existantes
contiennent des hash BCrypt ("$2a$…", "$2b$…", "$2y$…") : ils sont reconnus,
vérifiés avec bcrypt, puis remplacés par le format courant à la connexion
suivante. Tout mot de passe stocké sans préfixe connu est considéré comme du
texte en clair hérité.
"""

import bcrypt
from werkzeug.security import check_password_hash, generate_password_hash

WERKZEUG_PREFIXES = ("pbkdf2:", "scrypt:")
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
HASH_PREFIXES = WERKZEUG_PREFIXES + BCRYPT_PREFIXES


class PasswordHasher:
    def __init__(self, method: str = "pbkdf2:sha256:600000", salt_length: int = 16):
        self.method = method
        self.salt_length = salt_length

    def hash(self, plaintext: str) -> str:
        return generate_password_hash(plaintext, method=self.method, salt_length=self.salt_length)

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Comparaison en temps constant (werkzeug et bcrypt)."""
        if not hashed or not is_hashed(hashed):
            return False
        if is_bcrypt(hashed):
            try:
                return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
            except ValueError:
                # Hash BCrypt tronqué ou mal formé
                return False
        return check_password_hash(hashed, plaintext)

    def needs_rehash(self, hashed: str) -> bool:
        """Vrai pour un hash d'un autre format que la méthode configurée."""
        return not hashed.startswith(self.method + "$")


def is_hashed(stored: str) -> bool:
    return stored.startswith(HASH_PREFIXES)


def is_bcrypt(stored: str) -> bool:
    return stored.startswith(BCRYPT_PREFIXES)
