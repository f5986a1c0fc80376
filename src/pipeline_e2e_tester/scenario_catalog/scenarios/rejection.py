"""Scenarios judged from the submission response alone."""

from __future__ import annotations

from pipeline_e2e_tester.configuration.runtime_settings import ReceiverTarget, TargetEnvironment
from pipeline_e2e_tester.console_output import ScenarioConsole
from pipeline_e2e_tester.payload_production import fixture_path, substitute_text
from pipeline_e2e_tester.response_interpretation import (
    DESTINATION_COUNT,
    ERROR_COUNT,
    WARNING_COUNT,
)

from ..catalog_models import Classification, E2ETestOptions
from ..scenario_base import E2ETestCase, county_list

QUALITY_FILTER_ITEM_COUNT = 5
BAD_CSV_FIXTURES = ("not-a-csv-file.csv", "completely-empty-file.csv")
OTC_TEMPLATE = "otc-template.csv"
OTC_DEVICE_RECEIVERS = (
    (
        "BinaxNOW COVID-19 Antigen Self Test_Abbott Diagnostics Scarborough, Inc.",
        "OTC_PROCTORED_YYY",
    ),
    ("QuickVue At-Home COVID-19 Test_Quidel Corporation", "OTC_PROCTORED_NYY"),
    ("00810055970001", "OTC_PROCTORED_NUNKUNK"),
)


class Garbage(E2ETestCase):
    """Data from the empty schema must be rejected with one warning per receiver."""

    name = "garbage"
    description = "Garbage in - Nice error message out"
    classification = Classification.ALWAYS_FAILING

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        sender = self.catalog.sender_for_role("empty")
        receivers = self.catalog.all_good_receivers()
        console.ugly(
            f"Starting {self.name} Test: send {sender.full_name} data to {county_list(receivers)}"
        )
        payload = self.create_fake_file(
            sender, len(receivers) * options.items, receivers, options, console
        )
        response = self.post(environment, payload, sender, options, console)
        console.detail(response.body)
        outcome = self.parse(
            response.body, console, required_counts=(WARNING_COUNT, DESTINATION_COUNT)
        )
        if outcome is None:
            return False
        console.echo(f"Id of submitted report: {outcome.submission_id}")
        passed = True
        if outcome.warning_count == len(receivers):
            console.good(f"garbage Test passed: {outcome.warning_count} warnings were returned.")
        else:
            passed = self.fail(
                console,
                f"Expecting {len(receivers)} warnings but got {outcome.warning_count}",
            )
        if outcome.destination_count == 0:
            console.good("garbage Test passed: Items went to 0 destinations.")
        else:
            passed = self.fail(
                console, f"Expecting 0 destinationCount but got {outcome.destination_count}"
            )
        return passed


class QualityFilter(E2ETestCase):
    """Each quality filter receiver keeps a known share of five fake items."""

    name = "qualityfilter"
    description = "Test the QualityFilter feature"
    classification = Classification.SMOKE

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        console.ugly(f"Starting {self.name} Test")
        sender = self.catalog.sender_for_role("empty")
        cases = (
            ("Test the allowAll QualityFilter", "QUALITY_ALL", "", QUALITY_FILTER_ITEM_COUNT),
            ("Test a QualityFilter that allows some data through", "QUALITY_PASS", ",removed", 3),
            ("Test a QualityFilter that allows NO data through.", "QUALITY_FAIL", "", 0),
            (
                "Test the REVERSE of the QualityFilter that allows some data through",
                "QUALITY_REVERSED",
                ",kept",
                2,
            ),
        )
        results = []
        for headline, receiver_name, extra_counties, expected in cases:
            console.ugly(f"\n{headline}")
            receiver = self.catalog.require_receiver(receiver_name)
            payload = self.create_fake_file(
                sender,
                QUALITY_FILTER_ITEM_COUNT,
                receiver.name + extra_counties,
                options,
                console,
            )
            response = self.post(environment, payload, sender, options, console)
            results.append(self._check_item_count(receiver, expected, response.body, console))
        return all(results)

    def _check_item_count(
        self, receiver: ReceiverTarget, expected: int, body: str, console: ScenarioConsole
    ) -> bool:
        console.detail(body)
        outcome = self.parse(body, console)
        if outcome is None or outcome.submission_id is None:
            return self.fail(console, f"Unexpected json returned for {receiver.name}")
        console.echo(f"Id of submitted report: {outcome.submission_id}")
        actual = outcome.item_count_for(receiver.name)
        if actual is None:
            if expected == 0:
                return console.good(f"Test Passed: No data went to {receiver.name} dest")
            return console.bad(f"***Test FAILED***: No data went to {receiver.name} dest")
        if actual == expected:
            return console.good(
                f"Test Passed: For {receiver.name} expected {expected} and found {actual}"
            )
        return console.bad(
            f"***Test FAILED***; For {receiver.name} expected {expected} but got {actual}"
        )


class TooManyCols(E2ETestCase):
    name = "toomanycols"
    description = "Submit a file with more than the maximum number of columns, which should error"
    classification = Classification.SMOKE

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        console.ugly("Starting toomanycols Test: submitting a file with too many columns.")
        payload = fixture_path(self.services.fixtures_dir, "too-many-columns.csv")
        sender = self.catalog.sender_for_role("simple_report")
        response = self.post(environment, payload, sender, options, console)
        console.detail(response.body)
        return _expect_first_error(self, response.body, "columns", console)


class BadCsv(E2ETestCase):
    name = "badcsv"
    description = "Submit badly formatted csv files - should get errors"
    classification = Classification.SMOKE

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        sender = self.catalog.sender_for_role("simple_report")
        passed = True
        for index, filename in enumerate(BAD_CSV_FIXTURES):
            console.ugly(f"Starting badcsv file Test {index}: submitting {filename}")
            payload = fixture_path(self.services.fixtures_dir, filename)
            response = self.post(environment, payload, sender, options, console)
            label = f"badcsv Test {index} of {filename}"
            if response.status_code >= 400:
                console.good(
                    f"Test of Bad CSV file {filename} passed: "
                    "Failure HttpStatus code was returned."
                )
            else:
                passed = console.bad(f"***{label} FAILED: Expecting a failure HttpStatus. ***")
            outcome = self.parse(response.body, console, required_counts=(ERROR_COUNT,))
            if outcome is None:
                passed = console.bad(f"***{label} FAILED***: Unexpected json returned")
                continue
            if outcome.submission_id is None:
                console.good(f"Test of Bad CSV file {filename} passed: No UUID was returned.")
            else:
                passed = console.bad(
                    f"***{label} FAILED: The pipeline returned a valid UUID for a bad CSV. ***"
                )
            if outcome.error_count is not None and outcome.error_count > 0:
                console.good(
                    f"Test of Bad CSV file {filename} passed: At least one error was returned."
                )
            else:
                passed = console.bad(f"***{label} FAILED: No error***")
        return passed


class TooBig(E2ETestCase):
    name = "toobig"
    description = "Submit one line more than the maximum, which should be an error.  Slower ;)"
    classification = Classification.LOAD

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        sender = self.catalog.sender_for_role("simple_report")
        receiver = self.catalog.require_receiver("CSV")
        item_count = self.services.max_report_items + 1
        console.ugly(
            f"Starting toobig test: Attempting to send a report with {item_count} items. "
            "This is slllooooowww."
        )
        payload = self.create_fake_file(
            sender, item_count, (receiver,), options, console, fmt="CSV"
        )
        response = self.post(environment, payload, sender, options, console)
        console.detail(response.body)
        return _expect_first_error(self, response.body, "rows", console)


class OtcProctored(E2ETestCase):
    """Device identifiers must route to the matching over-the-counter receiver."""

    name = "otcproctored"
    description = "Verify that otc/proctored flags are working as expected on api response"
    classification = Classification.SMOKE

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        sender = self.catalog.sender_for_role("waters")
        template = fixture_path(self.services.fixtures_dir, OTC_TEMPLATE)
        failures = []
        for device_id, receiver_name in OTC_DEVICE_RECEIVERS:
            console.ugly(
                "Starting Otc Test: submitting a file containing a device_id:"
                f" {device_id} should match receiver {receiver_name}."
            )
            payload = substitute_text(template, "replaceMe", device_id, options.working_dir)
            response = self.post(environment, payload, sender, options, console)
            if self.examine_response(response.body, console):
                console.good(f"Test PASSED: {device_id}")
            else:
                console.bad(f"Test FAILED: {device_id}")
                failures.append(device_id)
        if failures:
            return console.bad(f"Tests FAILED: {failures}")
        return True


def _expect_first_error(
    scenario: E2ETestCase, body: str, fragment: str, console: ScenarioConsole
) -> bool:
    outcome = scenario.parse(body, console)
    if outcome is None or not outcome.error_details:
        return scenario.fail(console, "Unable to parse json response")
    if fragment in outcome.error_details[0]:
        return console.good(f"{scenario.name} Test passed.")
    return scenario.fail(console, "Did not find the error")
