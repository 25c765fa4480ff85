"""Sample spec sources and reports shared across tests."""

from pathlib import Path
from typing import Any, Dict

APP_SPEC = """\
import { test, expect } from '@playwright/test';
import {AnnotationType} from './custom-annotation-types.enum';

test.describe('Angular App E2E Tests', {
  tag: '@feature1',
  annotation: {
    type: 'feature',
    description: 'Initial page',
  }
}, () => {
  test('displays welcome message', async ({ page }) => {
    test.info().annotations.push(
      { type: AnnotationType.Description, description: 'Navigate to the home page and see the welcome message.' },
      { type: AnnotationType.Step, description: 'Navigate to the home page' },
      { type: AnnotationType.Expected, description: 'Welcome test should be "Hello"' },
      { type: AnnotationType.Expected, description: 'Page title should be "app"' }
    );
    await page.goto('/');

    const welcomeText = page.locator('h1');
    await expect(welcomeText).toContainText('Hello');

    const title = await page.title();
    expect(title).toBeTruthy();
  });
})
"""

APP2_SPEC = """\
import { test, expect } from '@playwright/test';
import {AnnotationType} from './custom-annotation-types.enum';

const description = `Here will be the description of the test suite. With support of Markdown syntax.`

test.describe('Another section', {
  tag: '@feature2',
  annotation: {
    type: 'feature',
    description: 'Here will be the description of real feature. Now just a placeholder.',
  }
}, () => {
  test('has title', async ({ page }) => {
    test.info().annotations.push({
      type: AnnotationType.Feature,
      description: description
    })
    await page.goto('/');

    await expect(page).toHaveTitle(/app/i);
  });
})
"""

NO_SUITE_SPEC = """\
import { expect } from '@playwright/test';

export function helper() {
  return expect;
}
"""

APP2_DESCRIPTION = (
    "Here will be the description of the test suite. With support of Markdown syntax."
)


def report_payload(root: Path) -> Dict[str, Any]:
    return {
        "config": {"rootDir": str(root)},
        "suites": [
            {
                "title": "app.spec.ts",
                "file": "e2e/app.spec.ts",
                "specs": [],
                "suites": [
                    {
                        "title": "Angular App E2E Tests",
                        "file": "e2e/app.spec.ts",
                        "specs": [
                            {
                                "title": "displays welcome message",
                                "file": "e2e/app.spec.ts",
                                "tests": [
                                    {
                                        "projectName": "chromium",
                                        "annotations": [{"type": "Step", "description": "stale"}],
                                        "results": [
                                            {"annotations": [{"type": "Step", "description": "attempt 1"}]},
                                            {"annotations": [{"type": "Step", "description": "attempt 2"}]},
                                        ],
                                    },
                                    {
                                        "projectName": "firefox",
                                        "annotations": [{"type": "skip"}],
                                        "results": [],
                                    },
                                ],
                            }
                        ],
                    }
                ],
            }
        ],
    }
