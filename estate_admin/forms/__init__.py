from estate_admin.forms.base import ConditionalForm, FormResult
from estate_admin.forms.business import ProjectForm, SchemeForm, UnitForm
from estate_admin.forms.agreement import AgreementForm
from estate_admin.forms.contact import ContactInfoForm
from estate_admin.forms.admin import AdminForm
from estate_admin.forms.agent import AgentForm

__all__ = [
    "ConditionalForm",
    "FormResult",
    "ProjectForm",
    "SchemeForm",
    "UnitForm",
    "AgreementForm",
    "ContactInfoForm",
    "AdminForm",
    "AgentForm",
]
