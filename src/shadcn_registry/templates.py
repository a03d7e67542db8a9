"""
Source templates for generated registry files.

Every template is a plain string with `{{TOKEN}}` placeholders. The `render_*` functions are pure
`(name) -> text` transforms; the tokens each one fills are listed next to the template.
"""

from __future__ import annotations

import json
from importlib import resources

from shadcn_registry.errors import RegistryError
from shadcn_registry.naming import to_hook_function_name, to_pascal_case

# Tokens: COMPONENT_NAME (PascalCase), SLOT_NAME (kebab-case)
COMPONENT_TEMPLATE = """import * as React from "react"
import { cva, type VariantProps } from "class-variance-authority"

import { cn } from "@/lib/utils"

const {{COMPONENT_NAME}}Variants = cva(
  "inline-flex items-center justify-center rounded-md px-2.5 py-0.5 text-xs font-medium transition-colors focus-visible:outline-none focus-visible:ring-2 focus-visible:ring-ring disabled:pointer-events-none disabled:opacity-50",
  {
    variants: {
      variant: {
        default:
          "border-transparent bg-primary text-primary-foreground shadow hover:bg-primary/80",
        secondary:
          "border-transparent bg-secondary text-secondary-foreground hover:bg-secondary/80",
        destructive:
          "border-transparent bg-destructive text-destructive-foreground shadow hover:bg-destructive/80",
        outline: "text-foreground border border-input bg-background",
      },
    },
    defaultVariants: {
      variant: "default",
    },
  }
)

function {{COMPONENT_NAME}}({
  className,
  variant,
  ...props
}: React.ComponentProps<"div"> & VariantProps<typeof {{COMPONENT_NAME}}Variants>) {
  return (
    <div
      data-slot="{{SLOT_NAME}}"
      className={cn({{COMPONENT_NAME}}Variants({ variant, className }))}
      {...props}
    />
  )
}

export { {{COMPONENT_NAME}}, {{COMPONENT_NAME}}Variants }
"""

# Tokens: HOOK_NAME (camelCase function name)
HOOK_TEMPLATE = """"use client"

import * as React from "react"

export function {{HOOK_NAME}}(options?: { defaultValue?: boolean }) {
  const [value, setValue] = React.useState(options?.defaultValue ?? false)

  const toggle = React.useCallback(() => {
    setValue((v) => !v)
  }, [])

  return { value, setValue, toggle }
}
"""

# Tokens: BLOCK_PASCAL, BLOCK_NAME
BLOCK_COMPONENT_TEMPLATE = """"use client"

import * as React from "react"

import { cn } from "@/lib/utils"
import { use{{BLOCK_PASCAL}} } from "./use-{{BLOCK_NAME}}"

export function {{BLOCK_PASCAL}}({
  className,
  ...props
}: React.ComponentProps<"div">) {
  const { value, toggle } = use{{BLOCK_PASCAL}}()

  return (
    <div
      data-slot="{{BLOCK_NAME}}"
      className={cn("rounded-lg border p-4", className)}
      {...props}
    >
      <button
        type="button"
        onClick={toggle}
        className="text-sm font-medium"
      >
        Toggle: {value ? "ON" : "OFF"}
      </button>
    </div>
  )
}
"""

# Tokens: BLOCK_PASCAL
BLOCK_HOOK_TEMPLATE = """"use client"

import * as React from "react"

export function use{{BLOCK_PASCAL}}() {
  const [value, setValue] = React.useState(false)

  const toggle = React.useCallback(() => {
    setValue((v) => !v)
  }, [])

  return { value, setValue, toggle }
}
"""

# Tokens: REGISTRY_NAME, HOMEPAGE, STYLE_NAME (substituted JSON-escaped)
REGISTRY_MANIFEST_TEMPLATE = """{
  "$schema": "https://ui.shadcn.com/schema/registry.json",
  "name": "{{REGISTRY_NAME}}",
  "homepage": "{{HOMEPAGE}}",
  "style": "{{STYLE_NAME}}",
  "items": []
}
"""

PAGE_TEMPLATE_RESOURCE = "page.tsx"


def substitute(template: str, substitutions: dict[str, str]) -> str:
    text = template
    for token, replacement in substitutions.items():
        text = text.replace("{{" + token + "}}", replacement)
    return text


def render_component(name: str) -> str:
    return substitute(COMPONENT_TEMPLATE, {"COMPONENT_NAME": to_pascal_case(name), "SLOT_NAME": name})


def render_hook(name: str) -> str:
    return substitute(HOOK_TEMPLATE, {"HOOK_NAME": to_hook_function_name(name)})


def render_block_component(name: str) -> str:
    return substitute(BLOCK_COMPONENT_TEMPLATE, {"BLOCK_PASCAL": to_pascal_case(name), "BLOCK_NAME": name})


def render_block_hook(name: str) -> str:
    return substitute(BLOCK_HOOK_TEMPLATE, {"BLOCK_PASCAL": to_pascal_case(name)})


def _json_inner(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)[1:-1]


def render_registry_manifest(*, registry_name: str, homepage: str, style: str) -> str:
    return substitute(
        REGISTRY_MANIFEST_TEMPLATE,
        {
            "REGISTRY_NAME": _json_inner(registry_name),
            "HOMEPAGE": _json_inner(homepage),
            "STYLE_NAME": _json_inner(style),
        },
    )


def load_page_template() -> str:
    try:
        return (
            resources.files("shadcn_registry")
            .joinpath("assets", PAGE_TEMPLATE_RESOURCE)
            .read_text(encoding="utf-8")
        )
    except OSError as exc:
        raise RegistryError(f"Bundled page template is missing: {exc}") from exc
