from govdash.models import Organization, Proposal, Vote
from govdash.services import governance
from govdash.services.voting import leading_option


def test_seed_demo_loads_sample_governance_data(app, db_session):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["seed-demo"])

    assert result.exit_code == 0
    assert "Demo data loaded." in result.output
    assert Organization.query.count() == 2
    assert Proposal.query.count() == 3
    assert Vote.query.count() == 3

    treasury = governance.get_proposal("prop-2")
    results = governance.proposal_results(treasury)
    assert [row["votes"] for row in results] == [1500, 0, 0]
    assert leading_option(results)["option"] == "Approve Plan A"

    marketplace = governance.get_proposal("prop-3")
    assert marketplace.vote_type == "multiple-choice"
    assert governance.get_organization("org-2").members[0].startswith("0x1234")


def test_seed_demo_is_skipped_when_data_exists(app, db_session):
    runner = app.test_cli_runner()
    runner.invoke(args=["seed-demo"])

    result = runner.invoke(args=["seed-demo"])

    assert result.exit_code == 0
    assert "nothing to do" in result.output
    assert Organization.query.count() == 2
