from dataclasses import dataclass, field
from typing import Optional

from vitrine.core.entities import Principal, Role


@dataclass
class SessionContext:
    """
    Contexto de sessão com ciclo de vida explícito: preenchido no login,
    limpo no logout. Sem token o principal é sempre ANONYMOUS.
    """
    token: Optional[str] = None
    principal: Principal = field(default_factory=Principal)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.principal.is_authenticated

    def login(self, token: str, principal: Principal) -> None:
        self.token = token
        self.principal = principal

    def logout(self) -> None:
        self.token = None
        self.principal = Principal()

    def current_principal(self) -> Principal:
        if not self.token:
            return Principal(role=Role.ANONYMOUS)
        return self.principal

    def to_dict(self) -> dict:
        return {
            'token': self.token,
            'id': self.principal.id,
            'role': self.principal.role.value,
            'name': self.principal.name,
            'email': self.principal.email,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'SessionContext':
        if not data or not data.get('token'):
            return cls()
        try:
            role = Role(data.get('role') or Role.ANONYMOUS.value)
        except ValueError:
            role = Role.ANONYMOUS
        principal = Principal(
            id=data.get('id'),
            role=role,
            name=data.get('name') or '',
            email=data.get('email') or '',
        )
        return cls(token=data['token'], principal=principal)
