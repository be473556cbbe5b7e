from datetime import datetime, timezone

from flask import request

from govdash.errors import ValidationError
from govdash.services import governance
from govdash.services.timing import time_remaining
from govdash.services.voting import leading_option, total_vote_count, total_weight


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


def _parse_datetime(value, field):
    """Accept ISO-8601 strings or millisecond epoch timestamps; return naive UTC."""
    if isinstance(value, bool):
        value = None
    if isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise ValidationError(f"Invalid {field}.", {field: value}) from None
        return parsed.replace(tzinfo=None)
    if isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            raise ValidationError(f"Invalid {field}.", {field: value}) from None
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed
    raise ValidationError(f"{field.replace('_', ' ').capitalize()} is required.")


def _results_payload(proposal):
    results = governance.proposal_results(proposal)
    return {
        "results": results,
        "leading_option": leading_option(results) if total_weight(results) > 0 else None,
        "total_votes": total_vote_count(proposal.votes),
        "total_weight": total_weight(results),
    }


def _proposal_payload(proposal):
    payload = proposal.to_dict()
    payload.update(_results_payload(proposal))
    payload["votes"] = [vote.to_dict() for vote in proposal.votes]
    payload["time_remaining"] = time_remaining(proposal.end_date)
    return payload


def register_api_routes(app):
    @app.route("/api/organizations")
    def list_organizations():
        organizations = governance.list_organizations()
        return {"ok": True, "organizations": [org.to_dict() for org in organizations]}

    @app.route("/api/organizations", methods=["POST"])
    def create_organization():
        data = _json_body()
        organization = governance.create_organization(
            creator=data.get("creator"),
            name=data.get("name"),
            description=data.get("description"),
            chain=data.get("chain") or "ethereum",
            token_address=data.get("token_address"),
            token_name=data.get("token_name"),
            website=data.get("website"),
            social_links=data.get("social_links"),
            logo_url=data.get("logo_url"),
        )
        return {"ok": True, "organization": organization.to_dict()}, 201

    @app.route("/api/organizations/<organization_id>")
    def organization_detail(organization_id):
        organization = governance.get_organization(organization_id)
        return {"ok": True, "organization": organization.to_dict()}

    @app.route("/api/organizations/<organization_id>", methods=["PATCH"])
    def update_organization(organization_id):
        data = _json_body()
        editor = data.pop("editor", None)
        organization = governance.update_organization(organization_id, editor, **data)
        return {"ok": True, "organization": organization.to_dict()}

    @app.route("/api/organizations/<organization_id>/proposals")
    def organization_proposals(organization_id):
        proposals = governance.get_organization_proposals(organization_id)
        return {"ok": True, "proposals": [_proposal_payload(p) for p in proposals]}

    @app.route("/api/organizations/<organization_id>/proposals", methods=["POST"])
    def create_proposal(organization_id):
        data = _json_body()
        proposal = governance.create_proposal(
            organization_id,
            creator=data.get("creator"),
            title=data.get("title"),
            options=data.get("options"),
            start_date=_parse_datetime(data.get("start_date"), "start_date"),
            end_date=_parse_datetime(data.get("end_date"), "end_date"),
            vote_type=data.get("vote_type") or "single-choice",
            description=data.get("description"),
            summary=data.get("summary"),
            chain=data.get("chain"),
            token_details=data.get("token_details"),
            hybrid_voting=data.get("hybrid_voting"),
        )
        return {"ok": True, "proposal": _proposal_payload(proposal)}, 201

    @app.route("/api/proposals")
    def list_proposals():
        status = (request.args.get("status") or "").strip().lower() or None
        proposals = governance.list_proposals(status=status)
        return {"ok": True, "proposals": [_proposal_payload(p) for p in proposals]}

    @app.route("/api/proposals/<proposal_id>")
    def proposal_detail(proposal_id):
        proposal = governance.get_proposal(proposal_id)
        return {"ok": True, "proposal": _proposal_payload(proposal)}

    @app.route("/api/proposals/<proposal_id>", methods=["PATCH"])
    def update_proposal(proposal_id):
        data = _json_body()
        editor = data.pop("editor", None)
        for field in ("start_date", "end_date"):
            if field in data:
                data[field] = _parse_datetime(data[field], field)
        proposal = governance.update_proposal(proposal_id, editor, **data)
        return {"ok": True, "proposal": _proposal_payload(proposal)}

    @app.route("/api/proposals/<proposal_id>/votes", methods=["POST"])
    def cast_vote(proposal_id):
        data = _json_body()
        vote = governance.cast_vote(
            proposal_id,
            voter=data.get("voter"),
            choice=data.get("choice"),
            weight=data.get("weight"),
        )
        proposal = governance.get_proposal(proposal_id)
        return {"ok": True, "vote": vote.to_dict(), **_results_payload(proposal)}, 201

    @app.route("/api/proposals/<proposal_id>/results")
    def proposal_results(proposal_id):
        proposal = governance.get_proposal(proposal_id)
        return {"ok": True, "proposal_id": proposal.id, **_results_payload(proposal)}

    @app.route("/api/users/<address>")
    def user_summary(address):
        summary = governance.user_summary(address)
        return {
            "ok": True,
            "address": summary["address"],
            "organizations": [org.to_dict() for org in summary["organizations"]],
            "created_proposals": [p.to_dict() for p in summary["created_proposals"]],
            "votes": [
                {"proposal_id": vote.proposal_id, **vote.to_dict()}
                for vote in summary["votes"]
            ],
            "awaiting_vote": [p.to_dict() for p in summary["awaiting_vote"]],
            "stats": {
                "organizations": len(summary["organizations"]),
                "proposals_created": len(summary["created_proposals"]),
                "votes_cast": len(summary["votes"]),
                "awaiting_vote": len(summary["awaiting_vote"]),
            },
        }
