"""Settings of trigger and step instances."""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from lifecycle.models.setting import SETTINGS_TYPE_STEP, SETTINGS_TYPE_TRIGGER, Setting
from lifecycle.subplugins.registry import get_lib

SETTINGS_TYPES = (SETTINGS_TYPE_TRIGGER, SETTINGS_TYPE_STEP)


class SettingsService:
    """Key/value store scoped by subplugin instance and type."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service.

        Args:
            session: Database session.
        """
        self.session = session

    async def get_settings(self, instance_id: int, settings_type: str) -> dict[str, str | None]:
        """Return all settings of an instance.

        Args:
            instance_id: Trigger or step instance ID.
            settings_type: ``trigger`` or ``step``.

        Returns:
            Mapping of setting name to value.
        """
        _check_type(settings_type)
        stmt = (
            select(Setting)
            .where(Setting.instance_id == instance_id, Setting.type == settings_type)
            .order_by(Setting.id.asc())
        )
        result = await self.session.execute(stmt)
        return {setting.name: setting.value for setting in result.scalars().all()}

    async def save_settings(
        self,
        instance_id: int,
        settings_type: str,
        subpluginname: str,
        data: Mapping[str, Any] | Any,
    ) -> None:
        """Store the settings of an instance.

        Only the settings the subplugin declares are stored; other keys of
        ``data`` are ignored. ``data`` may be a mapping or any object with
        attributes.

        Args:
            instance_id: Trigger or step instance ID.
            settings_type: ``trigger`` or ``step``.
            subpluginname: Name of the subplugin the instance belongs to.
            data: Setting values.
        """
        _check_type(settings_type)
        lib = get_lib(settings_type, subpluginname)
        values = data if isinstance(data, Mapping) else vars(data)

        stmt = select(Setting).where(
            Setting.instance_id == instance_id,
            Setting.type == settings_type,
        )
        result = await self.session.execute(stmt)
        existing = {setting.name: setting for setting in result.scalars().all()}

        for name in lib.instance_settings():
            if name not in values:
                continue
            value = values[name]
            value = None if value is None else str(value)
            if name in existing:
                existing[name].value = value
            else:
                self.session.add(Setting(
                    instance_id=instance_id,
                    type=settings_type,
                    pluginname=subpluginname,
                    name=name,
                    value=value,
                ))
        await self.session.flush()

    async def remove_settings(self, instance_id: int, settings_type: str) -> None:
        """Delete all settings of an instance."""
        _check_type(settings_type)
        stmt = delete(Setting).where(
            Setting.instance_id == instance_id,
            Setting.type == settings_type,
        )
        await self.session.execute(stmt)


def _check_type(settings_type: str) -> None:
    if settings_type not in SETTINGS_TYPES:
        raise ValueError(f"Invalid settings type '{settings_type}'")
