# pluginsdk_tools

Tools for plugin SDK projects. The package has building blocks for generating
C++ source, a function wrapper generator, a small g++ build driver, and
installers for Visual Studio project templates and a Code::Blocks wizard.

## Installation

    pip install .

To run the tests, install the `test` extra and run `pytest`.

## Commands

### `pluginsdk-codeblocks-wizard CODEBLOCKS_DIR PLUGIN_SDK_DIR`

This command copies `PLUGIN_SDK_DIR/tools/templates/codeblocks/pluginsdk` into
`CODEBLOCKS_DIR/share/CodeBlocks/templates/wizard/pluginsdk`. It then adds a
`RegisterWizard(...)` line to the `RegisterWizards()` function in that
folder's `config.script`. If the wizard is already registered, the script is
left as it is and the command reports an update. On error the exit code is 1.

### `pluginsdk-funcs-gen [-oldstyle]`

This command reads `funcs.h` from the current directory and writes
`funcs_conv.h`. The input is laid out as follows:

- The first line is a word followed by the vtable base index.
- Virtual methods follow, one per line, as `ret Class::Name(params)`, up to a
  line that starts with `end`.
- One heading line comes next.
- Plain functions follow, as `callconv ret [Class::]Name(params) address`, up
  to another `end` line. The calling convention is `thiscall`, `stdcall` or
  anything else, which is taken as cdecl.
- Lines that start with `/` are kept as comments for the next entry.

The output holds declarations and wrapper bodies that use
`plugin::Call...` helpers. With `-oldstyle` (any letter case) it uses raw
`reinterpret_cast` calls instead. A summary of every parsed function is
printed to standard output.

### `pluginsdk-build COMMAND [key:(value) ...]`

This command builds the `ClCompile` sources of a `.vcxproj` file with `g++`,
then links them with `g++` (for a DLL) or archives them with `ar` (for a LIB).
`COMMAND` is `build`, `rebuild` or `clean`. The keys are:

- `buildtype:(DLL|LIB)`: required for `build` and `rebuild`.
- `projectdir:(...)`: required. The project file is
  `projectdir + projectname + ".vcxproj"`, so end the directory with a
  separator.
- `projectname:(...)`: required.
- `targetname:(...)`: required.
- `outdir:(...)`: defaults to the project directory.
- `intdir:(...)`: required.
- `definitions:(a;b)`: in each definition, `<` becomes `\` and `>` becomes `"`.
- `includeDirs:(...)`
- `libraryDirs:(...)`
- `libraries:(...)`
- `additional:(...)`: extra compiler options.
- `linkadditional:(...)`: extra linker options.
- `fulllog`: print every step in full.

Object files go to `intdir/projectname/`. The exit code tells you which error
occurred:

| Code | Error |
| ---- | ----- |
| 1 | not enough parameters |
| 2 | unknown command |
| 3 | build type not set |
| 4 | unknown build type |
| 5 | project directory not set |
| 6 | project name not set |
| 7 | target name not set |
| 8 | intermediate directory not set |
| 9 | project file cannot be opened |
| 10 | intermediate directory cannot be created |
| 11 | compile failed |
| 12 | output directory cannot be created |
| 13 | link failed |

### `pluginsdk-templates [options]`

This command generates Visual Studio project template archives for GTA SA,
GTA VC and GTA III. It runs in three steps:

1. It loads the folder settings from `--settings` (default `settings.ini`).
   With `--use-environment-variables`, every folder except the documents
   folder is set to `$(...)` environment variable references.
2. Folder options given on the command line take precedence. They are:
   - `--plugin-sdk-folder`
   - `--directx9-sdk-folder`
   - `--rwd3d9-folder`
   - `--vs-documents-folder`
   - `--sa-asi-output-folder`, `--sa-cleo-output-folder`,
     `--sa-cleo-sdk-folder`
   - the same three options with `vc` and with `iii` in place of `sa`
3. It saves the settings back to the settings file, then builds templates from
   the `--templates` folder (default `templates`).

The templates folder must hold:

- `Main.cpp`
- the icons `SA.ico`, `VC.ico` and `III.ico`
- a `vsNNNN` folder with `MyTemplate.vstemplate`, `Project.vcxproj` and
  `Project.vcxproj.filters`

The Visual Studio version is the first year from 2010 to 2017 that appears in
the documents folder path. If no year appears, it is 2010.

The command always builds the ASI templates for a game whose ASI output folder
is set. The other templates depend on further settings:

- D3D9 variants need the DirectX 9 SDK folder. For VC and III they also need
  the rwd3d9 folder.
- CLEO variants need the game's CLEO SDK folder and CLEO output folder.

Archives are written to
`<documents>/Templates/ProjectTemplates/Plugin-SDK/ASI` or `.../CLEO`.

## Library use

- `pluginsdk_tools.csvline`: `read_fields`, `read_lines`, `quote_value`
- `pluginsdk_tools.comments`: `format_comment`, `indentation`
- `pluginsdk_tools.enums`: `CppEnum` (`full_name`, `render`,
  `render_bitfield`), `EnumMember`, `bitfield_name`
- `pluginsdk_tools.codeblocks`: `register_wizard`, `install_wizard`,
  `WizardInstallError`
- `pluginsdk_tools.funcs_gen`: `parse_funcs`, `render`, `parse_parameter`,
  `correct_type_name`, `is_default_type`, `Function`, `FuncParam`, `CallType`
- `pluginsdk_tools.build`: `parse_arguments`, `read_project_sources`,
  `compile_command`, `link_command`, `build`, `clean`, `BuildParameters`,
  `BuildError`
- `pluginsdk_tools.project_item_file`: `ProjectItemFile`
- `pluginsdk_tools.template_generator`: `generate_template`,
  `template_title`, `Game`, `GenerationFlags`, `GenerationSettings`,
  `TemplateError`
- `pluginsdk_tools.settings`: `AppSettings`
- `pluginsdk_tools.wizard`: `generate_all`, `environment_settings`,
  `make_path_line`, `vs_version_from_documents_path`

Example:

```python
from pluginsdk_tools.csvline import read_fields, quote_value

read_fields('0x401000,"a, b",name', 3)   # ['0x401000', 'a, b', 'name']
quote_value("a,b")                       # '"a,b"'
```

## What it does not do

- There is no command that generates whole SDK headers or sources from the
  database files. Only the CSV reading, comment and enum rendering pieces are
  provided.
- The template installer is a command-line tool. It has no graphical window
  and no folder-browsing dialogs.