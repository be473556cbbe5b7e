import math
import uuid

from flask import current_app
from sqlalchemy.exc import IntegrityError

from govdash.errors import (
    AlreadyVoted,
    InvalidChoice,
    OrganizationNotFound,
    PermissionDenied,
    ProposalNotFound,
    ValidationError,
    VotingClosed,
)
from govdash.extensions import db
from govdash.models import Organization, Proposal, Vote
from govdash.services.timing import (
    derive_status,
    format_address,
    is_voting_active,
    utcnow,
)
from govdash.services.voting import tally

CHAINS = ("ethereum", "hedera", "soneium", "rootstock")
VOTE_TYPES = ("single-choice", "multiple-choice", "token-weighted")
PROPOSAL_STATUSES = ("pending", "active", "passed", "failed")

ORGANIZATION_UPDATABLE = {
    "name",
    "description",
    "chain",
    "token_address",
    "token_name",
    "website",
    "social_links",
    "logo_url",
}
PROPOSAL_UPDATABLE = {
    "title",
    "description",
    "summary",
    "options",
    "vote_type",
    "start_date",
    "end_date",
    "status",
    "chain",
    "token_details",
    "hybrid_voting",
}


def _new_id(prefix):
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _commit():
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def _require_text(value, field):
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ValidationError(f"{field.replace('_', ' ').capitalize()} is required.")
    return text


def _optional_text(value, field):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field.replace('_', ' ').capitalize()} must be text.")
    return value.strip() or None


def _check_chain(chain):
    if chain not in CHAINS:
        raise ValidationError("Unsupported chain.", {"chain": chain})
    return chain


def _clean_options(options):
    if not isinstance(options, (list, tuple)):
        raise ValidationError("Options must be a list of labels.")

    cleaned = [str(option).strip() for option in options if str(option).strip()]
    if len(cleaned) < 2:
        raise ValidationError("A proposal needs at least two options.")

    max_options = current_app.config["GOVDASH_MAX_OPTIONS"]
    if len(cleaned) > max_options:
        raise ValidationError(
            f"A proposal can have at most {max_options} options.",
            {"count": len(cleaned)},
        )
    return cleaned


def _check_window(start_date, end_date):
    if end_date <= start_date:
        raise ValidationError("Voting must end after it starts.")


# --- Organizations ---


def list_organizations():
    return Organization.query.order_by(Organization.created_at).all()


def get_organization(organization_id):
    organization = db.session.get(Organization, organization_id)
    if organization is None:
        raise OrganizationNotFound(
            "Organization not found.", {"organization_id": organization_id}
        )
    return organization


def create_organization(
    creator,
    name,
    description=None,
    chain="ethereum",
    token_address=None,
    token_name=None,
    website=None,
    social_links=None,
    logo_url=None,
):
    creator = _require_text(creator, "creator")
    organization = Organization(
        id=_new_id("org"),
        name=_require_text(name, "name"),
        description=_optional_text(description, "description"),
        creator=creator,
        chain=_check_chain(chain),
        token_address=token_address,
        token_name=token_name,
        website=website,
        social_links=social_links or {},
        logo_url=logo_url,
        members=[creator],
        created_at=utcnow(),
    )
    db.session.add(organization)
    _commit()

    current_app.logger.info(
        "Organization %s created by %s", organization.id, creator
    )
    return organization


def update_organization(organization_id, editor, **updates):
    organization = get_organization(organization_id)
    if editor != organization.creator:
        raise PermissionDenied(
            "Only the organization creator can edit it.",
            {"organization_id": organization_id},
        )

    unknown = set(updates) - ORGANIZATION_UPDATABLE
    if unknown:
        raise ValidationError(
            "These fields cannot be updated.", {"fields": ",".join(sorted(unknown))}
        )

    if "name" in updates:
        updates["name"] = _require_text(updates["name"], "name")
    if "chain" in updates:
        _check_chain(updates["chain"])
    if "description" in updates:
        updates["description"] = _optional_text(updates["description"], "description")

    for field, value in updates.items():
        setattr(organization, field, value)
    _commit()
    return organization


def get_organization_proposals(organization_id):
    return get_organization(organization_id).proposals


# --- Proposals ---


def list_proposals(status=None):
    query = Proposal.query
    if status:
        query = query.filter_by(status=status)
    return query.order_by(Proposal.created_at).all()


def get_proposal(proposal_id):
    proposal = db.session.get(Proposal, proposal_id)
    if proposal is None:
        raise ProposalNotFound("Proposal not found.", {"proposal_id": proposal_id})
    return proposal


def create_proposal(
    organization_id,
    creator,
    title,
    options,
    start_date,
    end_date,
    vote_type="single-choice",
    description=None,
    summary=None,
    chain=None,
    token_details=None,
    hybrid_voting=None,
    now=None,
):
    organization = get_organization(organization_id)

    if vote_type not in VOTE_TYPES:
        raise ValidationError("Invalid vote type.", {"vote_type": vote_type})
    _check_window(start_date, end_date)

    now = now or utcnow()
    proposal = Proposal(
        id=_new_id("prop"),
        organization_id=organization.id,
        title=_require_text(title, "title"),
        description=_optional_text(description, "description"),
        creator=_require_text(creator, "creator"),
        vote_type=vote_type,
        options=_clean_options(options),
        start_date=start_date,
        end_date=end_date,
        status=derive_status(start_date, now),
        summary=summary,
        chain=_check_chain(chain) if chain else organization.chain,
        token_details=token_details,
        hybrid_voting=hybrid_voting,
        created_at=now,
    )
    db.session.add(proposal)
    _commit()

    current_app.logger.info(
        "Proposal %s created in %s by %s (%s)",
        proposal.id,
        organization.id,
        proposal.creator,
        proposal.status,
    )
    return proposal


def can_edit_proposal(proposal_id, address):
    proposal = db.session.get(Proposal, proposal_id)
    if proposal is None:
        return False
    return bool(address) and proposal.creator == address


def update_proposal(proposal_id, editor, **updates):
    proposal = get_proposal(proposal_id)
    if not can_edit_proposal(proposal_id, editor):
        raise PermissionDenied(
            "Only the proposal creator can edit it.", {"proposal_id": proposal_id}
        )

    unknown = set(updates) - PROPOSAL_UPDATABLE
    if unknown:
        raise ValidationError(
            "These fields cannot be updated.", {"fields": ",".join(sorted(unknown))}
        )

    if proposal.votes and ({"options", "vote_type"} & set(updates)):
        raise ValidationError("Options and vote type are fixed once votes exist.")

    if "title" in updates:
        updates["title"] = _require_text(updates["title"], "title")
    if "options" in updates:
        updates["options"] = _clean_options(updates["options"])
    if "vote_type" in updates and updates["vote_type"] not in VOTE_TYPES:
        raise ValidationError("Invalid vote type.", {"vote_type": updates["vote_type"]})
    if "status" in updates and updates["status"] not in PROPOSAL_STATUSES:
        raise ValidationError("Invalid status value.", {"status": updates["status"]})
    if "chain" in updates and updates["chain"] is not None:
        _check_chain(updates["chain"])
    if "description" in updates:
        updates["description"] = _optional_text(updates["description"], "description")

    _check_window(
        updates.get("start_date", proposal.start_date),
        updates.get("end_date", proposal.end_date),
    )

    # An open or upcoming proposal without votes follows its (new) start date.
    if (
        "start_date" in updates
        and "status" not in updates
        and not proposal.votes
        and proposal.status in ("pending", "active")
    ):
        updates["status"] = derive_status(updates["start_date"])

    for field, value in updates.items():
        setattr(proposal, field, value)
    proposal.last_edited_at = utcnow()
    _commit()
    return proposal


def _normalize_choice(proposal, choice):
    """Return the stored form of a ballot: an int, or a sorted list of ints."""
    if isinstance(choice, (list, tuple)):
        indices = choice
    else:
        indices = [choice]

    if not indices or any(
        isinstance(index, bool) or not isinstance(index, int) for index in indices
    ):
        raise InvalidChoice("Select at least one option.")

    out_of_range = [index for index in indices if not 0 <= index < len(proposal.options)]
    if out_of_range:
        raise InvalidChoice(
            "Choice references an option this proposal does not have.",
            {"indices": ",".join(str(index) for index in out_of_range)},
        )

    unique = sorted(set(indices))
    if proposal.vote_type == "single-choice":
        if len(unique) != 1:
            raise InvalidChoice("Single-choice proposals accept exactly one option.")
        return unique[0]

    if isinstance(choice, (list, tuple)):
        return unique
    return choice


def cast_vote(proposal_id, voter, choice, weight=None, now=None):
    proposal = get_proposal(proposal_id)
    voter = _require_text(voter, "voter")
    now = now or utcnow()

    if proposal.status not in ("pending", "active") or not is_voting_active(
        proposal, now
    ):
        raise VotingClosed(
            "Voting is closed for this proposal.", {"proposal_id": proposal_id}
        )

    already_voted = AlreadyVoted(
        "This address has already voted on this proposal.",
        {"proposal_id": proposal_id, "voter": voter},
    )
    if has_voted(proposal.id, voter):
        raise already_voted

    stored_choice = _normalize_choice(proposal, choice)

    if weight is not None:
        if proposal.vote_type != "token-weighted":
            raise ValidationError("Only token-weighted proposals accept a vote weight.")
        if (
            isinstance(weight, bool)
            or not isinstance(weight, (int, float))
            or not math.isfinite(weight)
            or weight <= 0
        ):
            raise ValidationError("Vote weight must be a positive number.")
        weight = float(weight)

    if proposal.status == "pending":
        proposal.status = "active"

    vote = Vote(
        proposal_id=proposal.id,
        voter=voter,
        choice=stored_choice,
        weight=weight,
        timestamp=now,
    )
    db.session.add(vote)
    try:
        db.session.commit()
    except IntegrityError:
        # A concurrent request stored this voter's ballot first.
        db.session.rollback()
        raise already_voted from None
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(
        "Vote recorded on %s by %s: %s", proposal.id, format_address(voter), stored_choice
    )
    return vote


def has_voted(proposal_id, voter):
    return Vote.query.filter_by(proposal_id=proposal_id, voter=voter).first() is not None


def proposal_results(proposal):
    return tally(proposal.options, proposal.ballots())


# --- Users ---


def user_summary(address, now=None):
    """Dashboard view of one address: memberships, authored proposals, ballots
    cast, and open proposals still waiting for its vote."""
    address = _require_text(address, "address")
    now = now or utcnow()

    organizations = [
        organization
        for organization in list_organizations()
        if address in (organization.members or [])
    ]
    created = Proposal.query.filter_by(creator=address).order_by(Proposal.created_at).all()
    votes = (
        Vote.query.filter_by(voter=address)
        .order_by(Vote.timestamp.desc(), Vote.id.desc())
        .all()
    )
    voted_ids = {vote.proposal_id for vote in votes}
    awaiting = [
        proposal
        for proposal in list_proposals()
        if proposal.status in ("pending", "active")
        and proposal.id not in voted_ids
        and is_voting_active(proposal, now)
    ]

    return {
        "address": address,
        "organizations": organizations,
        "created_proposals": created,
        "votes": votes,
        "awaiting_vote": awaiting,
    }
