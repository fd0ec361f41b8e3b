"""Profile editor form.

The profile row is normally seeded at sign-up; saving updates it and
creates it when it is missing, so the first save always succeeds.
"""
from typing import Optional

from portfolio.core.schemas import ProfileInput, ProfileRecord
from portfolio.core.store import NOT_FOUND, StoreResult
from portfolio.features.forms.base import EntityForm

PROFILE_FIELDS = (
    'full_name', 'headline', 'bio', 'location', 'email',
    'phone', 'website', 'github', 'linkedin',
)


class ProfileForm(EntityForm):
    input_model = ProfileInput
    defaults = {field: '' for field in PROFILE_FIELDS}
    reset_on_success = False
    success_title = "Profile updated"
    success_description = "Your profile has been updated successfully!"
    failure_title = "Error updating profile"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.avatar_url: Optional[str] = None

    def load(self) -> Optional[ProfileRecord]:
        """Pre-fill the form from the stored profile, if there is one."""
        result = self.store.select_one('profiles', {'id': self.identity})
        if result.error is not None:
            if result.error.code == NOT_FOUND:
                return None
            result.raise_for_error()

        record = ProfileRecord.from_row(result.data)
        self.values = {field: getattr(record, field) for field in PROFILE_FIELDS}
        self.avatar_url = record.avatar_url or None
        return record

    def persist(self, data: ProfileInput) -> StoreResult:
        patch = data.model_dump()
        result = self.store.update('profiles', {'id': self.identity}, patch, identity=self.identity)
        if result.error is not None:
            return result
        if result.data:
            return StoreResult(data=result.data[0])
        return self.store.insert('profiles', {'id': self.identity, **patch}, identity=self.identity)
