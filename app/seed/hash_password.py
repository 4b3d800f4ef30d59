"""
Genera el hash bcrypt para ADMIN_PASSWORD o VIEWER_PASSWORD.

Uso:
    python -m app.seed.hash_password
    python -m app.seed.hash_password "mi contraseña"
"""
import sys
import getpass
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if args:
        password = args[0]
    else:
        password = getpass.getpass("Contraseña: ")
        if password != getpass.getpass("Repite la contraseña: "):
            print("❌ Las contraseñas no coinciden")
            return 1

    if not password:
        print("❌ La contraseña no puede estar vacía")
        return 1

    hashed = hash_password(password)
    print("Copia este valor en tu .env (entre comillas simples por los '$'):")
    print(f"  ADMIN_PASSWORD='{hashed}'")
    return 0

if __name__ == "__main__":
    sys.exit(main())
