"""Scenarios that submit data and confirm delivery through lineage records."""

from __future__ import annotations

from pipeline_e2e_tester.configuration.runtime_settings import TargetEnvironment
from pipeline_e2e_tester.console_output import ScenarioConsole
from pipeline_e2e_tester.response_interpretation import WARNING_COUNT

from ..catalog_models import Classification, E2ETestOptions
from ..scenario_base import E2ETestCase, county_list

HL7_NULL_ITEM_COUNT = 100


class End2End(E2ETestCase):
    name = "end2end"
    description = "Create Fake data, submit, wait, confirm sent via database lineage data"
    classification = Classification.SMOKE

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        sender = self.catalog.sender_for_role("simple_report")
        receivers = self.catalog.all_good_receivers()
        if not receivers:
            return self.fail(console, f"No receivers configured for {self.catalog.organization}")
        console.ugly(
            f"Starting {self.name} Test: send {sender.full_name} data to {county_list(receivers)}"
        )
        item_count = len(receivers) * options.items
        payload = self.create_fake_file(sender, item_count, receivers, options, console)
        response = self.post(environment, payload, sender, options, console)
        passed = True
        if response.is_created:
            console.good(f"Posting of report succeeded with response code {response.status_code}")
        else:
            passed = self.fail(console, f" response code {response.status_code}")
        console.detail(response.body)
        passed = self.examine_response(response.body, console) and passed
        self.wait(25, environment, console)
        submission_id = self.peek_submission_id(response.body)
        if submission_id is not None:
            passed = self.verify(submission_id, receivers, item_count, console) and passed
        return passed


class Merge(E2ETestCase):
    """Several identical submissions must coalesce into shared downstream reports."""

    name = "merge"
    description = "Submit multiple files, wait, confirm via db that merge occurred"
    classification = Classification.SMOKE

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        sender = self.catalog.sender_for_role("simple_report")
        # HL7 does not merge
        receivers = tuple(
            self.catalog.require_receiver(name) for name in ("CSV", "HL7_BATCH", "REDOX")
        )
        item_count = len(receivers) * options.items
        console.ugly(
            f"Starting merge test:  Merge {options.submits} reports, "
            f"each of which sends to {county_list(receivers)}"
        )
        payload = self.create_fake_file(sender, item_count, receivers, options, console)
        submission_ids = []
        for _ in range(options.submits):
            response = self.post(environment, payload, sender, options, console)
            if not response.is_created:
                return self.fail(console, f" response code {response.status_code}")
            submission_id = self.submission_id_from(response.body, console)
            if submission_id is None:
                return False
            submission_ids.append(submission_id)
        self.wait(40, environment, console)
        return self.services.verifier.verify_merge(
            submission_ids[0], receivers, item_count, options.submits, console=console
        )


class Hl7Null(E2ETestCase):
    name = "hl7null"
    description = "The NULL transport does db work, but no transport.  Uses HL7 format"
    classification = Classification.SMOKE

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        sender = self.catalog.sender_for_role("simple_report")
        receiver = self.catalog.require_receiver("HL7_NULL")
        console.ugly(
            "Starting hl7null Test: test of many threads all doing database interactions, "
            "but no sends. "
        )
        payload = self.create_fake_file(
            sender, HL7_NULL_ITEM_COUNT, (receiver,), options, console
        )
        response = self.post(environment, payload, sender, options, console)
        console.detail(response.body)
        if not response.is_created:
            return self.fail(console, f" response code {response.status_code}")
        submission_id = self.submission_id_from(response.body, console)
        if submission_id is None:
            return False
        self.wait(30, environment, console)
        return self.verify(submission_id, (receiver,), HL7_NULL_ITEM_COUNT, console)


class Strac(E2ETestCase):
    name = "strac"
    description = "Submit data in strac schema, send to all formats and variety of schemas"
    classification = Classification.SMOKE

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        sender = self.catalog.sender_for_role("strac")
        receivers = self.catalog.all_good_receivers()
        redox = self.catalog.require_receiver("REDOX")
        console.ugly(
            "Starting bigly strac Test: sending Strac data to all of these receivers: "
            f"{county_list(receivers)}!"
        )
        payload = self.create_fake_file(
            sender, len(receivers) * options.items, receivers, options, console
        )
        response = self.post(environment, payload, sender, options, console)
        console.detail(response.body)
        if not response.is_created:
            return self.fail(console, f" response code {response.status_code}")
        outcome = self.parse(response.body, console, required_counts=(WARNING_COUNT,))
        if outcome is None:
            return False
        if outcome.submission_id is None:
            return self.fail(console, "A report ID came back as null")
        console.echo(f"Id of submitted report: {outcome.submission_id}")
        passed = True
        if outcome.warning_count == 0:
            console.good("First part of strac Test passed: 0 warnings were returned.")
        else:
            passed = self.fail(console, f"Expecting 0 warnings but got {outcome.warning_count}")
        self.wait(25, environment, console)
        return self.verify(outcome.submission_id, (redox,), options.items, console) and passed


class Huge(E2ETestCase):
    name = "huge"
    description = "Submit the maximum number of lines in one csv file, wait, confirm via db.  Slow."
    classification = Classification.LOAD

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        sender = self.catalog.sender_for_role("simple_report")
        receiver = self.catalog.require_receiver("CSV")
        item_count = self.services.max_report_items
        console.ugly(
            f"Starting huge Test: Attempting to send a report with {item_count} items. "
            "This is terrapin slow."
        )
        payload = self.create_fake_file(
            sender, item_count, (receiver,), options, console, fmt="CSV"
        )
        response = self.post(environment, payload, sender, options, console)
        console.detail(response.body)
        passed = True
        if not response.is_created:
            passed = self.fail(console, f" response code {response.status_code}")
        submission_id = self.submission_id_from(response.body, console)
        if submission_id is None:
            return False
        self.wait(30, environment, console)
        return self.verify(submission_id, (receiver,), item_count, console) and passed


class DbConnections(E2ETestCase):
    """Many HL7 sends at once used to exhaust database connections."""

    name = "dbconnections"
    description = "Test issue wherein many 'sends' caused db connection failures"
    classification = Classification.EXPERIMENTAL

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        sender = self.catalog.sender_for_role("simple_report")
        receiver = self.catalog.require_receiver("HL7")
        console.ugly(
            f"Starting dbconnections Test: test of many threads attempting to sftp "
            f"{options.items} HL7s."
        )
        payload = self.create_fake_file(sender, options.items, (receiver,), options, console)
        submission_ids = []
        for _ in range(options.submits):
            response = self.post(environment, payload, sender, options, console)
            console.detail(response.body)
            if not response.is_created:
                return self.fail(console, f" response code {response.status_code}")
            submission_id = self.submission_id_from(response.body, console)
            if submission_id is None:
                return False
            submission_ids.append(submission_id)
        self.wait(30, environment, console)
        results = [
            self.verify(submission_id, (receiver,), options.items, console)
            for submission_id in submission_ids
        ]
        return all(results)


class BadSftp(E2ETestCase):
    """A receiver whose sftp site is broken; its send stage must record nothing."""

    name = "badsftp"
    description = "Test the pipeline's response to sftp connection failures. Tests RETRY too!"
    classification = Classification.EXPERIMENTAL

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        sender = self.catalog.sender_for_role("simple_report")
        receiver = self.catalog.require_receiver("SFTP_FAIL")
        console.ugly(
            "Starting badsftp Test: test that our code handles sftp connectivity problems"
        )
        payload = self.create_fake_file(sender, options.items, (receiver,), options, console)
        response = self.post(environment, payload, sender, options, console)
        console.detail(response.body)
        if not response.is_created:
            return self.fail(console, f" response code {response.status_code}")
        submission_id = self.submission_id_from(response.body, console)
        if submission_id is None:
            return False
        self.wait(30, environment, console)
        console.echo("For this test, failure during send, is a 'pass'.")
        return self.verify(submission_id, (receiver,), options.items, console)


class Waters(E2ETestCase):
    name = "waters"
    description = "Submit data in waters schema, send to BLOBSTORE only"
    classification = Classification.SMOKE

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        sender = self.catalog.sender_for_role("waters")
        receiver = self.catalog.require_receiver("BLOBSTORE")
        console.ugly(
            f"Starting Waters: sending {options.items} Waters items to {receiver.name} receiver"
        )
        payload = self.create_fake_file(sender, options.items, (receiver,), options, console)
        try:
            response = self.post(environment, payload, sender, options, console)
        finally:
            payload.unlink(missing_ok=True)
        console.detail(response.body)
        if not response.is_created:
            return self.fail(console, f" response code {response.status_code}")
        submission_id = self.submission_id_from(response.body, console)
        if submission_id is None:
            return False
        self.wait(60, environment, console)
        return self.verify(submission_id, (receiver,), options.items, console)


class InternationalContent(E2ETestCase):
    """Non-ASCII data must survive all the way to the uploaded sftp file."""

    name = "intcontent"
    description = (
        "Create Fake data that includes international characters, "
        "submit, wait, confirm sent via database lineage data"
    )
    classification = Classification.EXPERIMENTAL

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        if not environment.is_local:
            return self.fail(
                console,
                "This test can only be run locally as it needs access to the SFTP folder.",
            )
        if not options.sftp_dir.is_dir():
            return self.fail(console, f"The folder {options.sftp_dir} cannot be found.")
        sender = self.catalog.sender_for_role("simple_report")
        receiver = self.catalog.require_receiver("HL7")
        console.ugly(f"Starting {self.name} Test: send {sender.full_name} data to {receiver.name}")
        payload = self.create_fake_file(
            sender, 1, (receiver,), options, console, locale="zh_CN"
        )
        response = self.post(environment, payload, sender, options, console)
        console.detail(response.body)
        if not response.is_created:
            return self.fail(console, f" response code {response.status_code}")
        submission_id = self.submission_id_from(response.body, console)
        if submission_id is None:
            return False
        self.wait(25, environment, console)
        with self.services.lineage_store.read_transaction() as snapshot:
            filename = snapshot.find_uploaded_filename(submission_id, receiver.name)
        if filename is not None:
            contents = (options.sftp_dir / filename).read_bytes().decode("utf-8", errors="replace")
            if contents.isascii():
                return self.fail(console, "File contents are only ASCII characters")
        return console.good(f"Test passed: for {self.name}")
