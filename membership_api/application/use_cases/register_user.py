from ...domain.entities import ProgramType, Role, User
from ...domain.errors import ConflictError


class IUserRepository:
    def get_by_email(self, email: str) -> User | None: ...
    def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: Role = Role.MEMBER,
        address: str | None = None,
        program_type: ProgramType | None = None,
    ) -> User: ...


class IPasswordHasher:
    def hash(self, plain: str) -> str: ...


class RegisterUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher):
        self.repo = repo
        self.hasher = hasher

    def execute(
        self,
        name: str,
        email: str,
        password: str,
        role: Role = Role.MEMBER,
        address: str | None = None,
        program_type: ProgramType | None = None,
    ) -> User:
        if self.repo.get_by_email(email):
            raise ConflictError("Email already in use", code="EMAIL_IN_USE")
        pwd_hash = self.hasher.hash(password)
        return self.repo.create(
            name, email, pwd_hash, role=role, address=address, program_type=program_type
        )
