from marshmallow import Schema, fields, validate, post_load, EXCLUDE

from journal.domain import Entry, PeriodLevels
from journal.utils.constants import LEVEL_MIN, LEVEL_MAX


def _level_field():
    return fields.Int(
        allow_none=True,
        load_default=None,
        validate=validate.Range(min=LEVEL_MIN, max=LEVEL_MAX),
    )


class PeriodLevelsSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    morning = _level_field()
    afternoon = _level_field()
    evening = _level_field()

    @post_load
    def make_levels(self, data, **kwargs):
        return PeriodLevels(**data)


class EntrySchema(Schema):
    """Raw journal entry as stored by the capture UI (camelCase keys)."""
    class Meta:
        unknown = EXCLUDE

    date = fields.Date(required=True)
    energy_levels = fields.Nested(PeriodLevelsSchema, data_key="energyLevels", load_default=PeriodLevels, allow_none=True)
    stress_levels = fields.Nested(PeriodLevelsSchema, data_key="stressLevels", load_default=PeriodLevels, allow_none=True)
    energy_source_text = fields.Str(data_key="energySources", load_default="", allow_none=True)
    stress_source_text = fields.Str(data_key="stressSources", load_default="", allow_none=True)

    @post_load
    def make_entry(self, data, **kwargs):
        data["energy_levels"] = data.get("energy_levels") or PeriodLevels()
        data["stress_levels"] = data.get("stress_levels") or PeriodLevels()
        # Null source text is treated as "no description"
        data['energy_source_text'] = data.get('energy_source_text') or ""
        data['stress_source_text'] = data.get('stress_source_text') or ""
        return Entry(**data)


class AggregateRowSchema(Schema):
    """Export row for one aggregate bucket."""
    date = fields.Str(attribute="bucket_key")
    energy = fields.Float(attribute="average_energy", allow_none=True)
    stress = fields.Float(attribute="average_stress", allow_none=True)
    entryCount = fields.Int(attribute="entry_count")
    topEnergySources = fields.List(fields.Str(), attribute="top_energy_sources")
    topStressSources = fields.List(fields.Str(), attribute="top_stress_sources")


class InsightRecordSchema(Schema):
    kind = fields.Str()
    metric = fields.Str(allow_none=True)
    category = fields.Str(allow_none=True)
    title = fields.Str(required=True)
    description = fields.Str(required=True)
    confidence = fields.Float(validate=validate.Range(min=0.0, max=1.0))
