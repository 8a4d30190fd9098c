"""
Localized (pt-BR) user-facing messages
"""

from dataclasses import dataclass

from igreja.core.errors import AuthErrorKind


@dataclass(frozen=True)
class EntityLabel:
    """Singular/plural nouns used to build CRUD messages"""
    singular: str
    plural: str
    deleted_verb: str = "deletado"

    def load_failed(self) -> str:
        return f"Não foi possível carregar os {self.plural}."

    def create_failed(self) -> str:
        return f"Não foi possível criar o {self.singular}."

    def update_failed(self) -> str:
        return f"Não foi possível atualizar o {self.singular}."

    def delete_failed(self) -> str:
        return f"Não foi possível deletar o {self.singular}."

    def created(self) -> str:
        return f"{self.singular.capitalize()} criado com sucesso!"

    def updated(self) -> str:
        return f"{self.singular.capitalize()} atualizado com sucesso!"

    def deleted(self) -> str:
        return f"{self.singular.capitalize()} {self.deleted_verb} com sucesso!"


MEMBERS = EntityLabel("membro", "membros")
LEADERS = EntityLabel("líder", "líderes")
APPOINTMENTS = EntityLabel("agendamento", "agendamentos")
EVENTS = EntityLabel("evento", "eventos")
USERS = EntityLabel("usuário", "usuários", deleted_verb="removido")

NOT_AUTHENTICATED = "Usuário não autenticado"
INVALID_DATA = "Dados inválidos"
ACCESS_DENIED = "Acesso negado"
NO_CHURCH_PERMISSION = "Você não tem permissão para alterar os dados da igreja"
NO_LOGO_PERMISSION = "Sem permissão para alterar logo da igreja"
EVENT_NOT_FOUND_TITLE = "Evento não encontrado"
EVENT_NOT_PUBLIC = "Este evento não está disponível publicamente."

AUTH_MESSAGES = {
    AuthErrorKind.INVALID_CREDENTIALS: "Email ou senha incorretos. Verifique suas credenciais.",
    AuthErrorKind.EMAIL_UNCONFIRMED: "Por favor, confirme seu email antes de fazer login.",
    AuthErrorKind.ALREADY_REGISTERED: "Este email já está cadastrado. Tente fazer login.",
    AuthErrorKind.WEAK_PASSWORD: "A senha não atende aos requisitos mínimos.",
    AuthErrorKind.UNKNOWN: "Não foi possível concluir a autenticação. Tente novamente.",
}


def auth_message(kind: AuthErrorKind) -> str:
    """Localized text for an auth failure kind"""
    return AUTH_MESSAGES.get(kind, AUTH_MESSAGES[AuthErrorKind.UNKNOWN])


def invalid_data(summary: str) -> str:
    return f"{INVALID_DATA}: {summary}"
