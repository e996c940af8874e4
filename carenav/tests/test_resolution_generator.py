import pytest

from carenav.common.enums import IssueCategory
from carenav.common.exceptions import UnknownCategoryError
from carenav.core.resolution.builders import GENERIC_INSURER, GENERIC_PROVIDER
from carenav.core.resolution.rule_based import BUILDERS, RuleBasedResolutionGenerator, select_builder
from carenav.core.resolution.schemas import IssueInput

ALL_CATEGORIES = [c.value for c in IssueCategory]


def _issue(category: str, **kwargs) -> IssueInput:
    return IssueInput(category=category, description=kwargs.pop("description", "Some issue"), **kwargs)


@pytest.fixture
def generator():
    return RuleBasedResolutionGenerator()


# ---------- Invariants for every category ----------


@pytest.mark.asyncio
@pytest.mark.parametrize("category", ALL_CATEGORIES)
async def test_resolution_map_is_complete(generator, category):
    result = await generator.generate(_issue(category))

    assert result.next_steps
    assert [s.order for s in result.next_steps] == list(range(1, len(result.next_steps) + 1))
    assert result.documents_needed
    assert result.who_is_responsible.parties
    for party in result.who_is_responsible.parties:
        assert party.name and party.role and party.contact_method
    assert result.likelihood_of_success in {"high", "medium", "low"}
    assert result.what_is_happening
    assert result.likelihood_reason
    assert result.who_is_responsible.primary_contact
    assert result.estimated_timeframe


@pytest.mark.asyncio
@pytest.mark.parametrize("category", ALL_CATEGORIES)
async def test_generate_is_deterministic(generator, category):
    issue = _issue(category, insurer_name="Aetna", provider_name="Mercy Clinic", amount_involved=1234.5)
    first = await generator.generate(issue)
    second = await generator.generate(issue)
    assert first == second
    assert first.model_dump() == second.model_dump()


@pytest.mark.asyncio
@pytest.mark.parametrize("category", ALL_CATEGORIES)
async def test_description_does_not_change_output(generator, category):
    a = await generator.generate(_issue(category, description="Blue Cross denied my claim"))
    b = await generator.generate(_issue(category, description="something else entirely"))
    assert a == b


@pytest.mark.asyncio
@pytest.mark.parametrize("category", ALL_CATEGORIES)
async def test_has_documents_is_informational(generator, category):
    a = await generator.generate(_issue(category, has_documents=True))
    b = await generator.generate(_issue(category, has_documents=False))
    assert a == b


@pytest.mark.asyncio
@pytest.mark.parametrize("category", ["denial", "bill", "prior_auth", "claim_pending"])
async def test_insurer_name_in_explanation(generator, category):
    result = await generator.generate(_issue(category, insurer_name="Zenith Health"))
    assert "Zenith Health" in result.what_is_happening
    assert any(p.name == "Zenith Health" for p in result.who_is_responsible.parties)


@pytest.mark.asyncio
@pytest.mark.parametrize("category", ["bill", "prior_auth", "records"])
async def test_provider_name_in_explanation(generator, category):
    result = await generator.generate(_issue(category, provider_name="Valley Medical"))
    assert "Valley Medical" in result.what_is_happening
    assert "Valley Medical" in result.who_is_responsible.primary_contact


@pytest.mark.asyncio
async def test_generic_names_when_absent(generator):
    denial = await generator.generate(_issue("denial"))
    names = [p.name for p in denial.who_is_responsible.parties]
    assert GENERIC_INSURER in names
    assert GENERIC_PROVIDER in names

    records = await generator.generate(_issue("records"))
    assert "the healthcare provider" in records.what_is_happening


# ---------- Unknown category ----------


@pytest.mark.asyncio
@pytest.mark.parametrize("category", ["unknown", "", "DENIAL", "dental"])
async def test_unknown_category_fails(generator, category):
    with pytest.raises(UnknownCategoryError) as exc_info:
        await generator.generate(_issue(category))
    assert "Unknown issue type" in str(exc_info.value)
    assert exc_info.value.category == category


def test_select_builder_covers_every_category():
    assert set(BUILDERS) == set(IssueCategory)
    for category in ALL_CATEGORIES:
        assert callable(select_builder(category))


def test_unknown_category_is_value_error():
    with pytest.raises(ValueError):
        select_builder("unknown")


# ---------- Likelihood policies ----------


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "amount,expected",
    [(None, "high"), (500, "high"), (1000, "high"), (1000.01, "medium"), (5000, "medium")],
)
async def test_denial_likelihood(generator, amount, expected):
    result = await generator.generate(_issue("denial", amount_involved=amount))
    assert result.likelihood_of_success == expected


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "amount,expected",
    [(None, "medium"), (1500, "medium"), (2000, "medium"), (2500, "high")],
)
async def test_bill_likelihood(generator, amount, expected):
    result = await generator.generate(_issue("bill", amount_involved=amount))
    assert result.likelihood_of_success == expected


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "category,expected",
    [("prior_auth", "medium"), ("records", "high"), ("claim_pending", "high")],
)
@pytest.mark.parametrize("amount", [None, 10, 50_000])
async def test_fixed_likelihoods(generator, category, expected, amount):
    result = await generator.generate(_issue(category, amount_involved=amount))
    assert result.likelihood_of_success == expected


@pytest.mark.asyncio
async def test_denial_likelihood_reason_follows_amount(generator):
    low = await generator.generate(_issue("denial", amount_involved=200))
    high = await generator.generate(_issue("denial", amount_involved=20_000))
    assert low.likelihood_reason != high.likelihood_reason


# ---------- Category details ----------


@pytest.mark.asyncio
async def test_denial_details(generator):
    result = await generator.generate(_issue("denial"))
    assert len(result.next_steps) == 5
    assert len(result.documents_needed) == 6
    assert len(result.warnings) == 4
    assert result.estimated_timeframe == "4-8 weeks for internal appeal decision"


@pytest.mark.asyncio
async def test_bill_details(generator):
    result = await generator.generate(_issue("bill"))
    assert len(result.next_steps) == 5
    assert len(result.documents_needed) == 6
    assert len(result.warnings) == 5
    assert any("before paying" in (s.deadline or "").lower() for s in result.next_steps)


@pytest.mark.asyncio
async def test_prior_auth_details(generator):
    result = await generator.generate(_issue("prior_auth"))
    actions = " ".join(s.action for s in result.next_steps)
    assert "Expedited" in actions
    assert any("peer-to-peer" in s.details for s in result.next_steps)
    assert "Standard" in result.estimated_timeframe
    assert "Urgent" in result.estimated_timeframe
    assert any("emergencies" in w for w in result.warnings)


@pytest.mark.asyncio
async def test_records_details(generator):
    result = await generator.generate(_issue("records"))
    assert result.estimated_timeframe == "15-30 days (legally required)"
    assert len(result.who_is_responsible.parties) == 1
    assert any("unpaid medical bills" in w for w in result.warnings)


@pytest.mark.asyncio
async def test_claim_pending_details(generator):
    result = await generator.generate(_issue("claim_pending"))
    assert "NOT mean it's denied" in result.what_is_happening
    assert any("45 days" in s.details for s in result.next_steps)


# ---------- End-to-end scenarios ----------


@pytest.mark.asyncio
async def test_scenario_denial(generator):
    result = await generator.generate(
        _issue("denial", description="My insurance denied my MRI claim", insurer_name="Blue Cross")
    )
    assert "denied" in result.what_is_happening
    assert "Blue Cross" in result.what_is_happening
    assert len(result.next_steps) >= 1
    assert len(result.documents_needed) >= 1


@pytest.mark.asyncio
async def test_scenario_bill(generator):
    result = await generator.generate(
        _issue(
            "bill",
            description="I got a confusing medical bill",
            provider_name="City Hospital",
            amount_involved=1500,
        )
    )
    assert "bill" in result.what_is_happening
    assert any("itemized" in s.action.lower() for s in result.next_steps)
    assert "City Hospital" in result.who_is_responsible.primary_contact


@pytest.mark.asyncio
async def test_scenario_prior_auth(generator):
    result = await generator.generate(
        _issue("prior_auth", description="My MRI needs approval", insurer_name="Aetna")
    )
    assert "Prior authorization" in result.what_is_happening
    assert result.estimated_timeframe


@pytest.mark.asyncio
async def test_scenario_records(generator):
    result = await generator.generate(
        _issue("records", description="I need my records", provider_name="Dr. Smith's Office")
    )
    assert "HIPAA" in result.what_is_happening
    assert result.likelihood_of_success == "high"


@pytest.mark.asyncio
async def test_scenario_claim_pending(generator):
    result = await generator.generate(
        _issue("claim_pending", description="Claim stuck", insurer_name="United Healthcare")
    )
    assert "pending" in result.what_is_happening
    assert result.likelihood_of_success == "high"


@pytest.mark.asyncio
async def test_scenario_unknown(generator):
    with pytest.raises(UnknownCategoryError, match="Unknown issue type"):
        await generator.generate(_issue("unknown", description="Some issue"))


# ---------- Serialisation ----------


@pytest.mark.asyncio
async def test_resolution_map_uses_camel_case_aliases(generator):
    result = await generator.generate(_issue("bill", provider_name="City Hospital"))
    data = result.model_dump(by_alias=True)
    assert {"whatIsHappening", "whoIsResponsible", "likelihoodOfSuccess", "nextSteps"} <= data.keys()
    assert "contactMethod" in data["whoIsResponsible"]["parties"][0]
    assert "primaryContact" in data["whoIsResponsible"]
