from igreja.models.tenant import Tenant
from igreja.models.auth_identity import AuthIdentity
from igreja.models.profile import Profile
from igreja.models.member import Member, MemberStatus
from igreja.models.leader import Leader, LeaderType
from igreja.models.appointment import Appointment, AppointmentStatus
from igreja.models.event import Event, EventRegistration, PaymentStatus
from igreja.core.permissions import UserRole

# Table name -> model, as exposed by the backend's table interface
TABLES = {
    "tenants": Tenant,
    "profiles": Profile,
    "members": Member,
    "leaders": Leader,
    "appointments": Appointment,
    "events": Event,
    "event_registrations": EventRegistration,
}
